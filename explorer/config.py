"""Explorer configuration file management.

Reads and writes the optional JSON config file that overrides the discovery
report markers, the output format, and the separator used to join
collection error messages.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from explorer.discovery.payload import (
    DISCOVERED_TESTS_END_MARK,
    DISCOVERED_TESTS_START_MARK,
)

OUTPUT_FORMATS = ("json", "yaml")

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "begin_marker": DISCOVERED_TESTS_START_MARK,
    "end_marker": DISCOVERED_TESTS_END_MARK,
    "output_format": "json",
    "message_separator": None,
}


def _read_overrides(path: Path | None) -> dict[str, Any]:
    """Read user overrides from *path*; unreadable or non-object files give none."""
    if path is None or not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


class ExplorerConfig:
    """Manages the explorer JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = {**DEFAULT_CONFIG, **_read_overrides(path)}

    def save(self) -> Path:
        """Write the current settings to the config file.

        Returns:
            The path written to.

        Raises:
            ValueError: If the config has no file path.
        """
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2) + "\n")
        return self.path

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def begin_marker(self) -> str:
        """Get the line that opens the embedded discovery report."""
        return str(
            self._data.get("begin_marker") or DEFAULT_CONFIG["begin_marker"]
        )

    @property
    def end_marker(self) -> str:
        """Get the line that closes the embedded discovery report."""
        return str(
            self._data.get("end_marker") or DEFAULT_CONFIG["end_marker"]
        )

    @property
    def output_format(self) -> str:
        """Get the report output format, falling back to json if unknown."""
        fmt = self._data.get("output_format", DEFAULT_CONFIG["output_format"])
        if fmt not in OUTPUT_FORMATS:
            return DEFAULT_CONFIG["output_format"]
        return str(fmt)

    @property
    def message_separator(self) -> str | None:
        """Get the error message separator (None = os.linesep)."""
        val = self._data.get("message_separator")
        return str(val) if val is not None else None

    def set_config(
        self,
        begin_marker: str | None = None,
        end_marker: str | None = None,
        output_format: str | None = None,
        message_separator: str | None = None,
    ) -> None:
        """Update configuration values.

        Raises:
            ValueError: If *output_format* is not a supported format.
        """
        if begin_marker is not None:
            self._data["begin_marker"] = begin_marker
        if end_marker is not None:
            self._data["end_marker"] = end_marker
        if output_format is not None:
            if output_format not in OUTPUT_FORMATS:
                raise ValueError(f"Unknown output format: {output_format}")
            self._data["output_format"] = output_format
        if message_separator is not None:
            self._data["message_separator"] = message_separator
