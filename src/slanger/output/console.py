"""Rich Console factory and theme for slanger output.

Consoles render to a StringIO buffer so that ``format_result() -> str``
stays a pure function. In non-TTY environments (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SLANGER_THEME = Theme(
    {
        "sl.ok": "bold green",
        "sl.error": "bold red",
        "sl.warning": "bold yellow",
        "sl.op": "bold cyan",
        "sl.key": "dim",
        "sl.id": "bold blue",
        "sl.rule": "magenta",
        "sl.form": "bold",
        "sl.ipa": "italic",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "sl.error",
    "warning": "sl.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=SLANGER_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    return _SEVERITY_STYLES.get(severity, "")
