"""Environment map helpers.

The pipeline threads an explicit ``dict[str, str]`` through every step
instead of mutating ``os.environ``. These helpers expand values against
that map and compute and apply deltas.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")
_PATH_SEP = ":"


def expand_value(value: str, env: Mapping[str, str]) -> str:
    """Expand ``${VAR}`` and ``$VAR`` references against ``env``.

    Unset variables expand to an empty string. The path separator that
    would be left dangling next to an empty expansion is dropped, so a
    search path never gains an implicit current directory. Separators
    inside resolved values and elsewhere in the literal text are kept.

    Examples:
        >>> expand_value("/usr/local/lib:${LD_LIBRARY_PATH}", {"LD_LIBRARY_PATH": "/opt/lib"})
        '/usr/local/lib:/opt/lib'
        >>> expand_value("/usr/local/lib:${LD_LIBRARY_PATH}", {})
        '/usr/local/lib'
        >>> expand_value("${PKG_CONFIG_PATH}:/usr/local/lib/pkgconfig", {})
        '/usr/local/lib/pkgconfig'
        >>> expand_value('export CXXFLAGS="$CXXFLAGS"', {"CXXFLAGS": "-std=c++11"})
        'export CXXFLAGS="-std=c++11"'
    """
    parts: list[str] = []
    drop_leading_sep = False
    pos = 0
    for match in _VAR_PATTERN.finditer(value):
        literal = value[pos : match.start()]
        pos = match.end()
        if drop_leading_sep and literal.startswith(_PATH_SEP):
            literal = literal[1:]
        drop_leading_sep = False

        resolved = env.get(match.group(1) or match.group(2), "")
        if not resolved:
            if literal.endswith(_PATH_SEP):
                literal = literal[:-1]
            elif not literal and not any(parts):
                # nothing before the empty reference: drop the separator after it
                drop_leading_sep = True
        parts.append(literal)
        parts.append(resolved)

    tail = value[pos:]
    if drop_leading_sep and tail.startswith(_PATH_SEP):
        tail = tail[1:]
    parts.append(tail)
    return "".join(parts)


def diff_env(before: Mapping[str, str], after: Mapping[str, str]) -> dict[str, str]:
    """Return variables that are new or changed in ``after``.

    Removals are not reported: a delta only ever adds or overrides.

    Examples:
        >>> diff_env({"A": "1", "B": "2"}, {"A": "1", "B": "3", "C": "4"})
        {'B': '3', 'C': '4'}
    """
    return {key: value for key, value in after.items() if before.get(key) != value}


def apply_delta(env: Mapping[str, str], delta: Mapping[str, str]) -> dict[str, str]:
    """Return a new environment map with ``delta`` applied."""
    merged = dict(env)
    merged.update(delta)
    return merged


__all__ = [
    "apply_delta",
    "diff_env",
    "expand_value",
]
