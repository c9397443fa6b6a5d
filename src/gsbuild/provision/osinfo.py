"""Host OS detection from the os-release descriptor."""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from gsbuild.provision.exceptions import UnsupportedOperatingSystemError

log = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


@dataclass(frozen=True, slots=True)
class OsRelease:
    """Identity of the host OS.

    Attributes:
        id: Lowercase distribution identifier (``ubuntu``, ``debian``...).
        version_id: Distribution version (``22.04``, ``12``...).
        pretty_name: Human readable name.
    """

    id: str
    version_id: str = ""
    pretty_name: str = ""

    def __str__(self) -> str:
        return f"{self.id} {self.version_id}".strip()


def parse_os_release(text: str) -> dict[str, str]:
    """Parse shell-style ``KEY=value`` lines.

    Examples:
        >>> parse_os_release('ID=ubuntu\\nVERSION_ID="22.04"\\n# comment\\n')
        {'ID': 'ubuntu', 'VERSION_ID': '22.04'}
    """
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            parts = [raw_value.strip("\"'")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def read_os_release(path: str | Path = OS_RELEASE_PATH) -> OsRelease:
    """Read the OS identity.

    Args:
        path: os-release file to read.

    Returns:
        Detected OsRelease.

    Raises:
        UnsupportedOperatingSystemError: If the file is missing or has no ID.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise UnsupportedOperatingSystemError(None, f"Cannot detect OS from {path}: {exc.strerror or exc}") from exc

    values = parse_os_release(text)
    os_id = values.get("ID", "").lower()
    if not os_id:
        raise UnsupportedOperatingSystemError(None, f"Cannot detect OS from {path}: no ID field")

    release = OsRelease(
        id=os_id,
        version_id=values.get("VERSION_ID", ""),
        pretty_name=values.get("PRETTY_NAME", ""),
    )
    log.info("Detected OS: %s", release)
    return release


__all__ = [
    "OS_RELEASE_PATH",
    "OsRelease",
    "parse_os_release",
    "read_os_release",
]
