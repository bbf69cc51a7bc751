"""theme — ANSI colour roles for CLI diagnostics.

Role-to-colour mappings come from ``cli/theme.yaml``, read once on first use.
Colour is only applied when the target stream is a TTY, so redirected
stderr stays plain.
"""

from __future__ import annotations

import sys
from typing import Any, Optional

import yaml

from usenest._paths import theme_path


class Theme:
    """Lazy-loaded ANSI colour theme.

    Attributes:
        resolved: Mapping of semantic role names to ANSI escape codes.
    """

    def __init__(self) -> None:
        self._resolved: Optional[dict[str, str]] = None

    def _load(self) -> dict[str, str]:
        tp = theme_path()
        if not tp.is_file():
            return {}
        with open(tp, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        if not raw:
            return {}
        ansi: dict[str, str] = raw.get("ansi", {})
        roles: dict[str, str] = raw.get("roles", {})
        resolved = {role: ansi.get(name, "") for role, name in roles.items()}
        resolved["reset"] = ansi.get("reset", "")
        return resolved

    @property
    def resolved(self) -> dict[str, str]:
        """Return the role-to-ANSI mapping, loading on first access."""
        if self._resolved is None:
            self._resolved = self._load()
        return self._resolved

    def colorize(self, text: str, role: str, *, stream: Any = None) -> str:
        """Wrap text in the colour for a role if the stream is a TTY.

        Args:
            text: The text to colorize.
            role: Semantic role name (e.g. 'error', 'changed', 'ok').
            stream: The stream the text goes to. Defaults to sys.stderr.

        Returns:
            Colorized text, or the text unchanged.
        """
        target = stream or sys.stderr
        if not hasattr(target, "isatty") or not target.isatty():
            return text
        code = self.resolved.get(role, "")
        if not code:
            return text
        return f"{code}{text}{self.resolved.get('reset', '')}"


_theme = Theme()


def colorize(text: str, role: str, *, stream: Any = None) -> str:
    """Colorize text using the global theme singleton."""
    return _theme.colorize(text, role, stream=stream)
