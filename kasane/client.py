"""
Kasane client facade.

Manages 4-dimensional space-time data (f, x, y, t) held by an external
engine: spaces, typed keys within spaces, values stored over ranges,
and range queries combining regions, value filters and existence checks.

Usage:
    kasane = Kasane(engine)
    kasane.add_space("sensor_data")
    kasane.add_key("sensor_data", "temperature", KeyType.INT)

    temperature = kasane.space("sensor_data").key("temperature")
    temperature.set_value({"z": 10, "x": [100], "y": [200], "i": 1}, 25)

    hot = temperature.get_value(
        and_(
            {"z": 10, "x": [100, 200], "y": [100, 200], "i": 1},
            value_filter("sensor_data", "temperature", IntFilter.greater_than(20)),
        ),
        options=OutputOptions.spatial(),
    )

Spatial ids (i == 0) describe static features; space-time ids (i != 0)
describe data valid within one time interval. Both mix freely in range
expressions.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from kasane.config import KasaneSettings
from kasane.executor import commands
from kasane.executor.commands import Range
from kasane.executor.gateway import CommandGateway, Engine
from kasane.executor.results import (
    decode_get_value_records,
    decode_select_records,
    expect_names,
    expect_output,
    expect_success,
)
from kasane.ir.model import GetValueRecord, KeyType, OutputOptions, SelectRecord, ValueEntry


class Kasane:
    """
    Typed operations over an engine.

    Every method sends exactly one command. Engine-reported failures
    raise CommandError with the engine's message; malformed input raises
    EncodingError before anything is sent.
    """

    def __init__(
        self,
        engine: Engine,
        debug: Optional[bool] = None,
        check_version: Optional[bool] = None,
        supported_versions: Optional[Sequence[str]] = None,
        settings: Optional[KasaneSettings] = None,
    ) -> None:
        self.gateway = CommandGateway(
            engine,
            debug=debug,
            check_version=check_version,
            supported_versions=supported_versions,
            settings=settings,
        )

    @classmethod
    def from_settings(cls, engine: Engine, settings: KasaneSettings) -> "Kasane":
        return cls(engine, settings=settings)

    @property
    def version_compatible(self) -> Optional[bool]:
        """Outcome of the construction-time version check, None if unknown."""
        return self.gateway.version_compatible

    # ========== Spaces ==========

    def add_space(self, space: str) -> None:
        expect_success(self.gateway.execute(commands.add_space(space)))

    def delete_space(self, space: str) -> None:
        """Delete a space and all of its keys and values."""
        expect_success(self.gateway.execute(commands.delete_space(space)))

    def show_spaces(self) -> List[str]:
        return expect_names(self.gateway.execute(commands.spaces()), "SpaceNames")

    # ========== Keys ==========

    def add_key(self, space: str, key: str, key_type: Union[KeyType, str]) -> None:
        """Create a key holding INT, BOOLEAN or TEXT values."""
        expect_success(self.gateway.execute(commands.add_key(space, key, key_type)))

    def delete_key(self, space: str, key: str) -> None:
        expect_success(self.gateway.execute(commands.delete_key(space, key)))

    def show_keys(self, space: str) -> List[str]:
        return expect_names(self.gateway.execute(commands.keys(space)), "KeyNames")

    # ========== Values ==========

    def put_value(self, space: str, key: str, range: Range, value: ValueEntry) -> None:
        """
        Store value over range without overwriting.

        Raises:
            CommandError: If any part of range already holds a value.
                Use set_value to overwrite instead.
        """
        expect_success(self.gateway.execute(commands.put_value(space, key, range, value)))

    def set_value(self, space: str, key: str, range: Range, value: ValueEntry) -> None:
        """Store value over range, overwriting existing values."""
        expect_success(self.gateway.execute(commands.set_value(space, key, range, value)))

    def get_value(
        self,
        space: str,
        key: str,
        range: Range,
        options: Optional[OutputOptions] = None,
    ) -> List[GetValueRecord]:
        """
        Read the values stored within range.

        Args:
            space: Name of the space
            key: Name of the key
            range: A range expression, typed or in client JSON form
            options: Which geometry and id annotations to attach

        Returns:
            One record per matched region
        """
        output = self.gateway.execute(commands.get_value(space, key, range, options))
        return decode_get_value_records(expect_output(output, "GetValue"))

    def delete_value(self, space: str, key: str, range: Range) -> None:
        expect_success(self.gateway.execute(commands.delete_value(space, key, range)))

    # ========== Queries ==========

    def select(self, range: Range, options: Optional[OutputOptions] = None) -> List[SelectRecord]:
        """Return the regions matching range, without values."""
        output = self.gateway.execute(commands.select(range, options))
        return decode_select_records(expect_output(output, "SelectValue"))

    # ========== Utility ==========

    def get_version(self) -> str:
        return self.gateway.get_version()

    # ========== Scoped handles ==========

    def space(self, name: str) -> "SpaceHandle":
        return SpaceHandle(self, name)


class SpaceHandle:
    """Key operations bound to one space."""

    def __init__(self, client: Kasane, space: str) -> None:
        self._client = client
        self.space = space

    def show_keys(self) -> List[str]:
        return self._client.show_keys(self.space)

    def add_key(self, key: str, key_type: Union[KeyType, str]) -> None:
        self._client.add_key(self.space, key, key_type)

    def delete_key(self, key: str) -> None:
        self._client.delete_key(self.space, key)

    def key(self, name: str) -> "KeyHandle":
        return KeyHandle(self._client, self.space, name)


class KeyHandle:
    """Value operations bound to one space and key."""

    def __init__(self, client: Kasane, space: str, key: str) -> None:
        self._client = client
        self.space = space
        self.key = key

    def get_value(
        self, range: Range, options: Optional[OutputOptions] = None
    ) -> List[GetValueRecord]:
        return self._client.get_value(self.space, self.key, range, options)

    def set_value(self, range: Range, value: ValueEntry) -> None:
        self._client.set_value(self.space, self.key, range, value)

    def put_value(self, range: Range, value: ValueEntry) -> None:
        self._client.put_value(self.space, self.key, range, value)

    def delete_value(self, range: Range) -> None:
        self._client.delete_value(self.space, self.key, range)
