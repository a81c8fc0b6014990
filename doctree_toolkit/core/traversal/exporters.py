from __future__ import annotations

"""Template-based exporters serialising the tree to text.

:class:`ExportTemplate` owns the walk, the indentation depth and the escaping
of every interpolated value. Subclasses only supply the three syntax-specific
fragments (directory start, directory end, file line), built with
:meth:`ExportTemplate.format` so that values are escaped on the way in::

    def render_file(self, file):
        return self.format('<File Name="{}" />', file.name)

A hook returning a plain string is rejected with :class:`UnsafeFragmentError`.
"""

from abc import abstractmethod
import re
from typing import Any, List, Mapping, Optional, Union

from lxml import etree as ET

from doctree_toolkit.core.exceptions import UnsafeFragmentError
from doctree_toolkit.core.models.entries import Directory, Entry, FileEntry
from doctree_toolkit.core.traversal.base import Traversal

__all__ = [
    "SafeFragment",
    "ExportTemplate",
    "XmlExporter",
    "MarkdownExporter",
]

XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

MARKDOWN_ESCAPES = {
    ch: "\\" + ch for ch in ("\\", "`", "*", "_", "{", "}", "[", "]", "(", ")", "#", "+", "-", ".", "!")
}


class SafeFragment:
    """Already-escaped output text."""

    __slots__ = ("content",)

    def __init__(self, content: str) -> None:
        self.content = content

    def __bool__(self) -> bool:
        return bool(self.content)

    def __repr__(self) -> str:
        return f"SafeFragment({self.content!r})"


class ExportTemplate(Traversal):
    """Skeleton exporter.

    Parameters
    ----------
    escape_map
        Character -> replacement table applied to every interpolated value.
    indent_size
        Spaces per nesting level.
    header
        Text emitted before the first rendered line.
    """

    def __init__(self, escape_map: Mapping[str, str], indent_size: int = 2, header: str = "") -> None:
        super().__init__()
        self.escape_map = dict(escape_map)
        self.indent_size = indent_size
        self.depth = 0
        self._header = header
        self._lines: List[str] = []
        self._pattern: Optional[re.Pattern[str]] = None
        if self.escape_map:
            chars = "".join(re.escape(ch) for ch in self.escape_map)
            self._pattern = re.compile(f"[{chars}]")

    # ----------------------------------------------------------- Escaping

    def escape(self, text: str) -> str:
        if self._pattern is None:
            return text
        return self._pattern.sub(lambda m: self.escape_map[m.group(0)], text)

    def raw(self, text: str) -> SafeFragment:
        """Mark literal syntax (never user data) as safe."""
        return SafeFragment(text)

    def format(self, template: str, *values: Any) -> SafeFragment:
        """Fill ``{}`` placeholders of *template* with escaped *values*.

        ``SafeFragment`` values are inserted verbatim, mappings are rendered
        through :meth:`render_attributes`, ``None`` becomes empty text and
        anything else is converted to ``str`` and escaped.
        """
        return SafeFragment(template.format(*(self._render_value(v) for v in values)))

    def _render_value(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, SafeFragment):
            return value.content
        if isinstance(value, Mapping):
            rendered = self.render_attributes(value)
            return rendered.content if isinstance(rendered, SafeFragment) else rendered
        return self.escape(str(value))

    def render_attributes(self, attrs: Mapping[str, Any]) -> Union[str, SafeFragment]:
        """Render a mapping as ``key="value"`` pairs separated by spaces."""
        return " ".join(f'{self.escape(str(k))}="{self.escape(str(v))}"' for k, v in attrs.items())

    # --------------------------------------------------------------- Walk

    def _write(self, fragment: Any) -> None:
        if not isinstance(fragment, SafeFragment):
            raise UnsafeFragmentError(
                f"{type(self).__name__} rendering hooks must return SafeFragment "
                f"(built with self.format), got {type(fragment).__name__}"
            )
        if not fragment.content:
            return
        self._lines.append(" " * (self.depth * self.indent_size) + fragment.content)

    def visit_directory(self, directory: Directory) -> None:
        self._write(self.render_directory_start(directory))
        self._progress(f"Exporting directory: {directory.name}", directory)
        self.depth += 1
        try:
            self.visit_children(directory)
        finally:
            self.depth -= 1
        self._write(self.render_directory_end(directory))

    def visit_file(self, file: FileEntry) -> None:
        self._write(self.render_file(file))
        self._progress(f"Exporting file: {file.name}", file)

    def walk(self, root: Entry, total: Optional[int] = None) -> "ExportTemplate":
        self.depth = 0
        self._lines = []
        super().walk(root, total)
        return self

    def result(self) -> str:
        return self._header + "".join(line + "\n" for line in self._lines)

    # -------------------------------------------------------------- Hooks

    @abstractmethod
    def render_directory_start(self, directory: Directory) -> SafeFragment:
        ...

    @abstractmethod
    def render_directory_end(self, directory: Directory) -> SafeFragment:
        ...

    @abstractmethod
    def render_file(self, file: FileEntry) -> SafeFragment:
        ...


class XmlExporter(ExportTemplate):
    """XML rendering: ``<Directory Name="..">`` / ``<File Name=".." Size="..KB" .. />``."""

    def __init__(self, indent_size: int = 2) -> None:
        super().__init__(XML_ESCAPES, indent_size, header='<?xml version="1.0" encoding="UTF-8"?>\n')

    def render_directory_start(self, directory: Directory) -> SafeFragment:
        return self.format('<Directory Name="{}">', directory.name)

    def render_directory_end(self, directory: Directory) -> SafeFragment:
        return self.format("</Directory>")

    def render_file(self, file: FileEntry) -> SafeFragment:
        attrs = self.format(" {}", file.attributes) if file.attributes else self.raw("")
        return self.format('<File Name="{}" Size="{}KB"{} />', file.name, file.size, attrs)

    def to_element(self) -> ET._Element:
        """Parse the exported document into an lxml element."""
        return ET.fromstring(self.result().encode("utf-8"))


class MarkdownExporter(ExportTemplate):
    """Markdown rendering: a heading per directory and a bullet per file."""

    def __init__(self, indent_size: int = 2, title: str = "File System Export") -> None:
        super().__init__(MARKDOWN_ESCAPES, indent_size, header=f"# {title}\n\n")

    def render_attributes(self, attrs: Mapping[str, Any]) -> str:
        pairs = ", ".join(f"{self.escape(str(k))}: {self.escape(str(v))}" for k, v in attrs.items())
        return f" \\[{pairs}\\]" if pairs else ""

    def render_directory_start(self, directory: Directory) -> SafeFragment:
        level = min(self.depth + 2, 6)
        return self.format("{} {}/", self.raw("#" * level), directory.name)

    def render_directory_end(self, directory: Directory) -> SafeFragment:
        return self.raw("")

    def render_file(self, file: FileEntry) -> SafeFragment:
        return self.format("{} {} ({}KB){}", self.raw("-"), file.name, file.size, file.attributes)
