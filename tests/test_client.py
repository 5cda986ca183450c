"""
Tests for the Kasane client facade

Each operation sends exactly one command of the documented shape and
narrows the reply to the documented result type.
"""

import pytest

from kasane import CommandError, EncodingError, Kasane, OutputOptions, ResponseShapeError
from kasane.builder import IntFilter, and_, value_filter
from kasane.ir import KeyType

REGION = {"z": 10, "x": [100], "y": [200], "i": 1}


@pytest.fixture
def client(engine):
    return Kasane(engine, check_version=False)


class TestConstruction:
    def test_version_checked_on_construction(self, engine):
        kasane = Kasane(engine, check_version=True)

        assert engine.requests[0] == {"command": ["Version"]}
        assert kasane.version_compatible is True

    def test_get_version(self, client):
        assert client.get_version() == "0.0.1"


class TestSpaces:
    def test_add_space(self, client, engine):
        client.add_space("sensor_data")
        assert engine.commands == [{"AddSpace": {"spacename": "sensor_data"}}]

    def test_delete_space(self, client, engine):
        client.delete_space("sensor_data")
        assert engine.last_command == {"DeleteSpace": {"spacename": "sensor_data"}}

    def test_show_spaces(self, client, engine):
        engine.queue({"Success": {"SpaceNames": ["a", "b"]}})

        assert client.show_spaces() == ["a", "b"]
        assert engine.last_command == {"Spaces": {}}

    def test_wrong_variant(self, client, engine):
        engine.queue({"Success": {"KeyNames": ["a"]}})
        with pytest.raises(ResponseShapeError):
            client.show_spaces()

    def test_success_payload_required(self, client, engine):
        engine.queue({"Success": {"SpaceNames": []}})
        with pytest.raises(ResponseShapeError):
            client.add_space("s")


class TestKeys:
    @pytest.mark.parametrize("key_type", [KeyType.INT, "BOOLEAN", "TEXT"])
    def test_add_key(self, client, engine, key_type):
        client.add_key("s", "k", key_type)
        assert engine.last_command == {
            "AddKey": {"spacename": "s", "keyname": "k", "type": KeyType(key_type).value}
        }

    def test_invalid_key_type_sends_nothing(self, client, engine):
        with pytest.raises(EncodingError):
            client.add_key("s", "k", "FLOAT")
        assert engine.commands == []

    def test_delete_key_uses_name_field(self, client, engine):
        client.delete_key("s", "k")
        assert engine.last_command == {"DeleteKey": {"spacename": "s", "name": "k"}}

    def test_show_keys(self, client, engine):
        engine.queue({"Success": {"KeyNames": ["temperature"]}})

        assert client.show_keys("s") == ["temperature"]
        assert engine.last_command == {"Keys": {"spacename": "s"}}

    def test_engine_error(self, client, engine):
        engine.queue({"Error": "space not found"})
        with pytest.raises(CommandError, match="space not found"):
            client.show_keys("missing")


class TestValues:
    def test_set_value(self, client, engine, wire_space_time_id):
        client.set_value("s", "k", REGION, 25)

        assert engine.last_command == {
            "SetValue": {
                "spacename": "s",
                "keyname": "k",
                "range": {
                    "SpaceTimeIdSet": [
                        wire_space_time_id(z=10, i=1, x={"Single": 100}, y={"Single": 200})
                    ]
                },
                "value": {"INT": 25},
            }
        }

    @pytest.mark.parametrize(
        "value,wire", [(True, {"BOOLEAN": True}), ("hot", {"TEXT": "hot"}), (0, {"INT": 0})]
    )
    def test_put_value_wraps_kind(self, client, engine, value, wire):
        client.put_value("s", "k", REGION, value)
        assert engine.last_command["PutValue"]["value"] == wire

    def test_put_conflict_then_set(self, client, engine):
        engine.queue({"Error": "value already exists"})

        with pytest.raises(CommandError) as exc_info:
            client.put_value("s", "k", REGION, 1)
        assert "already exists" in exc_info.value.message

        client.set_value("s", "k", REGION, 1)
        assert [list(c)[0] for c in engine.commands] == ["PutValue", "SetValue"]

    def test_bad_value_sends_nothing(self, client, engine):
        with pytest.raises(EncodingError):
            client.set_value("s", "k", REGION, 1.5)
        assert engine.commands == []

    def test_bad_range_sends_nothing(self, client, engine):
        with pytest.raises(EncodingError):
            client.set_value("s", "k", {"x": [1]}, 1)
        assert engine.commands == []

    def test_get_value(self, client, engine, wire_space_time_id):
        engine.queue(
            {
                "Success": {
                    "GetValue": [
                        {
                            "spacetimeid": wire_space_time_id(z=10, i=1, x={"Single": 100}),
                            "value": {"INT": 25},
                            "center": [0.5, 0.5, 0.5],
                        }
                    ]
                }
            }
        )
        expr = and_(REGION, value_filter("s", "k", IntFilter.greater_than(20)))

        [record] = client.get_value("s", "k", expr, options=OutputOptions.spatial())

        assert record.value == 25
        assert record.center == (0.5, 0.5, 0.5)
        sent = engine.last_command["GetValue"]
        assert (sent["vertex"], sent["center"], sent["id_string"], sent["id_pure"]) == (
            True,
            True,
            False,
            False,
        )
        assert list(sent["range"]["Prefix"]) == ["AND"]

    def test_get_value_default_options(self, client, engine):
        engine.queue({"Success": {"GetValue": []}})

        assert client.get_value("s", "k", REGION) == []
        sent = engine.last_command["GetValue"]
        assert not any(sent[name] for name in ("vertex", "center", "id_string", "id_pure"))

    def test_delete_value(self, client, engine):
        client.delete_value("s", "k", {"HasValue": {"space": "s", "key": "k"}})
        assert engine.last_command == {
            "DeleteValue": {
                "spacename": "s",
                "keyname": "k",
                "range": {"Function": {"HasValue": {"spacename": "s", "keyname": "k"}}},
            }
        }


class TestSelect:
    def test_select(self, client, engine, wire_space_time_id):
        engine.queue(
            {"Success": {"SelectValue": [{"spacetimeid": wire_space_time_id(z=3)}]}}
        )

        [record] = client.select({"z": 3}, options=OutputOptions.ids())

        assert record.space_time_id.z == 3
        sent = engine.last_command["Select"]
        assert sent["id_string"] is True and sent["id_pure"] is True
        assert sent["vertex"] is False

    def test_select_wrong_variant(self, client, engine):
        engine.queue({"Success": {"GetValue": []}})
        with pytest.raises(ResponseShapeError):
            client.select({"z": 3})


class TestScopedHandles:
    def test_space_handle(self, client, engine):
        space = client.space("s")
        space.add_key("k", "INT")
        space.delete_key("k")

        assert engine.commands == [
            {"AddKey": {"spacename": "s", "keyname": "k", "type": "INT"}},
            {"DeleteKey": {"spacename": "s", "name": "k"}},
        ]

    def test_space_handle_show_keys(self, client, engine):
        engine.queue({"Success": {"KeyNames": ["k"]}})
        assert client.space("s").show_keys() == ["k"]

    def test_key_handle(self, client, engine):
        key = client.space("s").key("k")
        key.set_value(REGION, "x")
        key.put_value(REGION, "y")
        key.delete_value(REGION)
        engine.queue({"Success": {"GetValue": []}})
        key.get_value(REGION)

        assert [list(c)[0] for c in engine.commands] == [
            "SetValue",
            "PutValue",
            "DeleteValue",
            "GetValue",
        ]
        assert all(c[list(c)[0]]["spacename"] == "s" for c in engine.commands)
        assert all(c[list(c)[0]]["keyname"] == "k" for c in engine.commands)
