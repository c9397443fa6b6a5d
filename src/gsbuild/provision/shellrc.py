"""Idempotent persistence of environment lines to a shell startup file."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_RC_FILE = "~/.bashrc"
RC_FILE_ENV_VAR = "GSBUILD_SHELL_RC"


def append_lines(path: str | os.PathLike[str], lines: Iterable[str]) -> list[str]:
    """Append each line to ``path`` unless an identical line already exists.

    Matching is on the whole line, exactly (``grep -qxF``). Running this
    twice with the same lines never produces duplicates.

    Args:
        path: File to update; created if missing.
        lines: Lines to ensure, without trailing newline.

    Returns:
        The lines actually appended.
    """
    rc_path = Path(path).expanduser()
    existing = rc_path.read_text(encoding="utf-8").splitlines() if rc_path.exists() else []
    present = set(existing)

    added: list[str] = []
    for line in lines:
        if line in present:
            continue
        present.add(line)
        added.append(line)

    if added:
        rc_path.parent.mkdir(parents=True, exist_ok=True)
        prefix = ""
        if rc_path.exists() and rc_path.stat().st_size > 0 and not rc_path.read_bytes().endswith(b"\n"):
            prefix = "\n"
        with rc_path.open("a", encoding="utf-8") as handle:
            handle.write(prefix + "".join(f"{line}\n" for line in added))
        log.info("Appended %d line(s) to %s", len(added), rc_path)
    else:
        log.info("%s already up to date", rc_path)
    return added


def persist_environment(*lines: str, env: Mapping[str, str]) -> dict[str, str]:
    """Callable step target: persist ``lines`` to the shell startup file.

    The file is ``$GSBUILD_SHELL_RC`` from the pipeline environment, or
    ``~/.bashrc``. Produces no environment delta.
    """
    rc_file = env.get(RC_FILE_ENV_VAR) or DEFAULT_RC_FILE
    append_lines(rc_file, lines)
    return {}


__all__ = [
    "DEFAULT_RC_FILE",
    "RC_FILE_ENV_VAR",
    "append_lines",
    "persist_environment",
]
