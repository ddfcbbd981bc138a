"""Line-oriented diff rendering for canonical table serializations."""

import difflib
import io
from typing import Protocol

from rich.console import Console
from rich.text import Text

TEXT_MODES = ("text", "color", "html")

LINE_STYLES = {
    "+": "green",
    "-": "red",
    "@": "cyan",
}


class TextDiffer(Protocol):
    """Renders a line diff between two serialized table shapes."""

    def render(
        self, own: str, other: str, mode: str, own_label: str = "", other_label: str = ""
    ) -> str:
        ...


class LineDiffer:
    """TextDiffer built on difflib, with rich for colored output."""

    def render(
        self, own: str, other: str, mode: str, own_label: str = "", other_label: str = ""
    ) -> str:
        own_lines = own.splitlines()
        other_lines = other.splitlines()

        if mode == "html":
            return difflib.HtmlDiff().make_table(
                own_lines, other_lines, fromdesc=own_label, todesc=other_label
            )

        # Full context, so the whole shape is visible around each change
        context = max(len(own_lines), len(other_lines))
        lines = list(
            difflib.unified_diff(
                own_lines,
                other_lines,
                fromfile=own_label,
                tofile=other_label,
                n=context,
                lineterm="",
            )
        )
        if mode == "color":
            return self._colorize(lines)
        return "\n".join(lines)

    def _colorize(self, lines: list[str]) -> str:
        buffer = io.StringIO()
        console = Console(
            file=buffer, force_terminal=True, color_system="standard", highlight=False
        )
        for line in lines:
            style = LINE_STYLES.get(line[:1], "")
            if line.startswith(("+++", "---")):
                style = "bold"
            console.print(Text(line, style=style), soft_wrap=True)
        return buffer.getvalue().rstrip("\n")


DEFAULT_DIFFER = LineDiffer()
