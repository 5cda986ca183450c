"""
Kasane Command Gateway

Sends one command to the engine and unwraps its reply.

Every call is one command in, one result out:

    request:  {"command": [<command>]}            (JSON string)
    response: [{"Success": <Output>} | {"Error": <message>}, ...]

Only element [0] of the response is read. An Error result becomes a
CommandError carrying the engine's message verbatim; a Success result is
returned as is for the caller to narrow.

On construction the gateway asks the engine for its version once and
compares it against the supported window. A mismatch, or a failure to
get the version at all, is a warning: the gateway stays usable.
"""

from __future__ import annotations

import json
import logging
import warnings
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from kasane.config import KasaneSettings, get_settings
from kasane.executor import commands
from kasane.ir.validation import (
    CommandError,
    ResponseShapeError,
    VersionCompatibilityWarning,
    describe,
)

logger = logging.getLogger(__name__)


def enable_debug_logging() -> None:
    """
    Route this module's DEBUG traces somewhere visible.

    A console handler is attached only when no handler is reachable
    up the logger tree.
    """
    logger.setLevel(logging.DEBUG)
    if not logger.hasHandlers():
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)


class Engine(Protocol):
    """The engine's single synchronous entry point."""

    def execute(self, request: str) -> str: ...


# ---------- Version comparison ----------


def parse_version(version: str) -> List[int]:
    """
    Split a dotted version into integers.

    Components that are not integers count as 0, so "1.x.3" -> [1, 0, 3].
    """
    parts = []
    for part in str(version).strip().split("."):
        try:
            parts.append(int(part))
        except ValueError:
            parts.append(0)
    return parts


def compare_versions(a: str, b: str) -> int:
    """
    Compare two dotted versions component-wise.

    Missing trailing components are treated as 0, so "1.2" == "1.2.0".

    Returns:
        Negative if a < b, zero if equal, positive if a > b
    """
    pa, pb = parse_version(a), parse_version(b)
    for index in range(max(len(pa), len(pb))):
        left = pa[index] if index < len(pa) else 0
        right = pb[index] if index < len(pb) else 0
        if left != right:
            return left - right
    return 0


def is_version_in_range(version: str, min_version: str, max_version: str) -> bool:
    """True if min_version <= version <= max_version, both ends inclusive."""
    return (
        compare_versions(version, min_version) >= 0
        and compare_versions(version, max_version) <= 0
    )


# ---------- Gateway ----------


class CommandGateway:
    """
    Dispatches commands to an engine through the single-command envelope.

    After construction the only state is the outcome of the version
    check, which is written once and read thereafter.
    """

    def __init__(
        self,
        engine: Engine,
        debug: Optional[bool] = None,
        check_version: Optional[bool] = None,
        supported_versions: Optional[Sequence[str]] = None,
        settings: Optional[KasaneSettings] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            engine: Object exposing execute(request_json) -> response_json
            debug: Log every request and response at DEBUG level
            check_version: Run the version compatibility check now
            supported_versions: Inclusive (min, max) engine version window
            settings: Defaults for any argument left as None
        """
        settings = settings or get_settings()
        self._engine = engine
        self.debug = settings.DEBUG if debug is None else debug
        if self.debug:
            enable_debug_logging()
        min_version, max_version = (
            supported_versions or settings.supported_engine_versions
        )
        self.supported_versions: Tuple[str, str] = (min_version, max_version)

        self.engine_version: Optional[str] = None
        self.version_compatible: Optional[bool] = None

        if settings.CHECK_VERSION if check_version is None else check_version:
            self._check_version_compatibility()

    def execute(self, command: Any) -> Any:
        """
        Execute one command and return its Output.

        Args:
            command: A command variant, e.g. {"AddSpace": {"spacename": "s"}}

        Returns:
            The Success payload, unmodified

        Raises:
            CommandError: If the engine reports {"Error": message}
            ResponseShapeError: If the response is not a result list
        """
        request = json.dumps({"command": [command]})
        if self.debug:
            logger.debug("INPUT :%s", request)

        raw = self._engine.execute(request)
        result = self._first_result(raw)

        if self.debug:
            logger.debug("OUTPUT:%s", json.dumps(result))

        if "Error" in result:
            raise CommandError(result["Error"], command=command)
        return result["Success"]

    def _first_result(self, raw: Any) -> dict:
        try:
            results = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ResponseShapeError(f"engine response is not JSON: {e}", raw) from e

        if not isinstance(results, list) or not results:
            raise ResponseShapeError(
                f"engine response is not a non-empty result list: {describe(results)}",
                results,
            )
        first = results[0]
        if isinstance(first, dict) and len(first) == 1:
            if "Error" in first and isinstance(first["Error"], str):
                return first
            if "Success" in first:
                return first
        raise ResponseShapeError(f"unrecognized command result: {describe(first)}", first)

    def get_version(self) -> str:
        """Ask the engine for its version string."""
        output = self.execute(commands.version())
        if isinstance(output, dict) and isinstance(output.get("Version"), str):
            return output["Version"]
        raise ResponseShapeError(
            f"Unexpected response format for Version: {describe(output)}", output
        )

    def _check_version_compatibility(self) -> None:
        min_version, max_version = self.supported_versions
        try:
            version = self.get_version()
        except Exception as e:  # initialization never fails on the version check
            message = (
                f"Could not verify engine version compatibility: {e}. "
                "Continuing with initialization."
            )
            logger.warning(message)
            warnings.warn(message, VersionCompatibilityWarning, stacklevel=3)
            return

        self.engine_version = version
        self.version_compatible = is_version_in_range(version, min_version, max_version)
        if not self.version_compatible:
            message = (
                f'Engine version "{version}" is outside the supported range '
                f'"{min_version}" - "{max_version}". '
                "Functionality may be limited or behave unexpectedly."
            )
            logger.warning(message)
            warnings.warn(message, VersionCompatibilityWarning, stacklevel=3)
        else:
            logger.debug("Engine version %s is supported", version)
