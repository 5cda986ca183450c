"""
Kasane command line.

Usage:
    python -m kasane encode '{"AND": [{"z": 10, "x": [1, 5]}, {"HasValue": {"space": "s", "key": "k"}}]}'
    python -m kasane version --engine mypackage.engine:Engine
    python -m kasane exec --engine mypackage.engine:Engine '{"Spaces": {}}'

The engine is loaded from "module:attribute"; the attribute is called
with no arguments to create the engine instance.
"""

import argparse
import importlib
import json
import logging
import sys
from typing import Any, Optional

from kasane import __version__
from kasane.config import get_settings
from kasane.executor.gateway import CommandGateway
from kasane.ir.serialize import encode_range
from kasane.ir.validation import CommandError, KasaneError

logger = logging.getLogger(__name__)


def load_engine(target: str) -> Any:
    """
    Import and instantiate an engine from "module:attribute".

    Raises:
        ValueError: If target is not of that form.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"engine must be given as module:attribute, got {target!r}")
    module = importlib.import_module(module_name)
    factory = getattr(module, attr)
    return factory()


def _print_json(value: Any, indent: Optional[int]) -> None:
    print(json.dumps(value, indent=indent))


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code: 0 on success, 1 if the engine reported an error,
        2 for usage, encoding or loading errors
    """
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="kasane",
        description="Encode range queries and send commands to a Kasane engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
    0 - Success
    1 - The engine reported an error
    2 - Usage, encoding or engine loading error
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        help="Logging level (default: %(default)s, env KASANE_LOG_LEVEL)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print JSON output with this indent",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Print the wire form of a range expression")
    encode_parser.add_argument("range", type=str, help="Range expression as JSON")

    for name, help_text in (
        ("version", "Print the engine version and whether it is supported"),
        ("exec", "Execute one raw command and print its output"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--engine", "-e", required=True, help="Engine factory as module:attribute")
        sub.add_argument("--debug", action="store_true", help="Trace requests and responses")
        if name == "exec":
            sub.add_argument("payload", type=str, help="Command as JSON, e.g. '{\"Spaces\": {}}'")

    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=getattr(logging, parsed.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if parsed.command == "encode":
            _print_json(encode_range(json.loads(parsed.range)), parsed.indent)
            return 0

        engine = load_engine(parsed.engine)
        logger.debug("Loaded engine from %s", parsed.engine)
        debug = parsed.debug or settings.DEBUG
        if debug:
            logging.getLogger("kasane").setLevel(logging.DEBUG)

        if parsed.command == "version":
            gateway = CommandGateway(engine, debug=debug, check_version=True, settings=settings)
            _print_json(
                {
                    "version": gateway.engine_version,
                    "supported": list(gateway.supported_versions),
                    "compatible": gateway.version_compatible,
                },
                parsed.indent,
            )
            return 0

        gateway = CommandGateway(engine, debug=debug, check_version=False, settings=settings)
        _print_json(gateway.execute(json.loads(parsed.payload)), parsed.indent)
        return 0

    except CommandError as e:
        print(f"Engine error: {e}", file=sys.stderr)
        return 1
    except (KasaneError, ValueError, ImportError, AttributeError) as e:
        # json.JSONDecodeError is a ValueError
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
