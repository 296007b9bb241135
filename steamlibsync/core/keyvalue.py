# steamlibsync/core/keyvalue.py

"""
Read-only parser for Steam's text KeyValues format (VDF/ACF).

Tokenising is done by the ``vdf`` package; the parsed mapping is then wrapped
into a tagged tree of :class:`KeyValueNode` objects. A node is either a leaf
(``value`` set) or a branch (``children`` set). Child lookup by name is
case-insensitive and never raises: a missing key yields an empty node, so
callers can chain lookups like ``kv["UserConfig"]["name"]`` and check
``is_empty`` at the end.

Used for appmanifest_*.acf, libraryfolders.vdf, loginusers.vdf,
localconfig.vdf and mod descriptors (gameinfo.txt, liblist.gam).

Hand-written descriptors (Source SDK gameinfo.txt) use bare tokens such as
``game+mod  |gameinfo_path|.`` that ``vdf`` rejects. When ``vdf`` fails, the
text is re-tokenised once with every bare token quoted and parsed again.
Platform conditionals (``[$WIN32]``) are dropped in that pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, TextIO

import vdf

__all__ = [
    "KeyValueNode",
    "KeyValueParseError",
    "load",
    "load_file",
    "loads",
    "parse_document",
]


class KeyValueParseError(ValueError):
    """Raised when a KeyValues document is malformed or truncated.

    Steam rewrites these files in place, so a read racing a writer can see
    half a file. Callers treat this as an unreadable source for that unit.
    """


@dataclass
class KeyValueNode:
    """One node of a parsed KeyValues document.

    Attributes:
        name: Key of this node (``None`` for an anonymous document root).
        value: Scalar value for leaf nodes, ``None`` for branches.
        children: Ordered child nodes for branches.
    """

    name: str | None = None
    value: str | None = None
    children: list[KeyValueNode] = field(default_factory=list)

    def __getitem__(self, key: str) -> KeyValueNode:
        """Return the first child named ``key`` (case-insensitive) or an empty node."""
        wanted = key.casefold()
        for child in self.children:
            if child.name is not None and child.name.casefold() == wanted:
                return child
        return KeyValueNode(name=key)

    def __iter__(self) -> Iterator[KeyValueNode]:
        return iter(self.children)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and not self[key].is_empty

    @property
    def is_empty(self) -> bool:
        """True for a missing key (no value and no children)."""
        return self.value is None and not self.children

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def get_path(self, *keys: str) -> KeyValueNode:
        """Walks a nested path of child names.

        Args:
            *keys: Child names from this node downwards.

        Returns:
            The node at the end of the path, empty if any step is missing.
        """
        node = self
        for key in keys:
            node = node[key]
        return node

    def as_str(self, default: str = "") -> str:
        return self.value if self.value is not None else default

    def as_int(self, default: int = 0) -> int:
        """Scalar value as an integer, ``default`` when absent or not numeric."""
        if self.value is None:
            return default
        try:
            return int(self.value.strip())
        except ValueError:
            return default

    def as_bool(self, default: bool = False) -> bool:
        if self.value is None:
            return default
        return self.value.strip().lower() in ("1", "true", "yes")

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict view (later duplicate keys win), mainly for debugging."""
        result: dict[str, Any] = {}
        for child in self.children:
            result[child.name or ""] = child.to_dict() if child.has_children else child.value
        return result

    @classmethod
    def from_mapping(cls, name: str | None, mapping: Mapping[str, Any]) -> KeyValueNode:
        """Builds a node tree from a nested mapping as produced by ``vdf``.

        Args:
            name: Name for the returned node.
            mapping: Nested mapping of str -> (str | mapping).

        Returns:
            Branch node mirroring the mapping.
        """
        node = cls(name=name)
        for key, value in mapping.items():
            if isinstance(value, Mapping):
                node.children.append(cls.from_mapping(str(key), value))
            else:
                node.children.append(cls(name=str(key), value=str(value)))
        return node


SECTION_START = "{"
SECTION_END = "}"

_TOKEN_RE = re.compile(
    r'"(?:\\.|[^\\"])*"?'  # quoted, may span lines or be unterminated
    r"|//[^\n]*"
    r"|\n"
    r"|[ \t\r\f\v]+"
    r"|[{}]"
    r"|\[[^\]\n]*\]"
    r"|(?:[^\s{}\"/]|/(?!/))+",
    re.DOTALL,
)


def _quote_bare_tokens(text: str) -> str:
    """Rewrites a KeyValues document so every token is quoted.

    Braces are put on lines of their own, comments and platform
    conditionals are removed. Quoted tokens pass through untouched, so an
    unterminated quote still fails to parse afterwards.

    Args:
        text: Document contents.

    Returns:
        Equivalent document that ``vdf`` can tokenise.
    """
    lines: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            lines.append(" ".join(current))
            current.clear()

    for match in _TOKEN_RE.finditer(text):
        token = match.group(0)
        if token == "\n":
            flush()
        elif token in (SECTION_START, SECTION_END):
            flush()
            lines.append(token)
        elif token.startswith('"'):
            current.append(token)
        elif token.startswith(("//", "[")) or token.isspace():
            continue
        else:
            current.append('"' + token.replace("\\", "\\\\") + '"')
    flush()
    return "\n".join(lines)


def parse_document(text: str) -> KeyValueNode:
    """Parses a whole document into an anonymous root.

    Top-level keys become children of the returned node. Flat files such as
    ``liblist.gam`` (``key "value"`` per line, no enclosing block) are read
    through this function.

    Args:
        text: Document contents.

    Returns:
        Anonymous root node.

    Raises:
        KeyValueParseError: On malformed or truncated input.
    """
    try:
        data = vdf.loads(text)
    except (SyntaxError, TypeError) as e:
        try:
            data = vdf.loads(_quote_bare_tokens(text))
        except (SyntaxError, TypeError):
            raise KeyValueParseError(str(e)) from e
    return KeyValueNode.from_mapping(None, data)


def loads(text: str) -> KeyValueNode:
    """Parses a document and returns its first top-level block.

    Steam files have exactly one root key (``AppState``, ``libraryfolders``,
    ``UserLocalConfigStore``...), so lookups start directly below it.

    Args:
        text: Document contents.

    Returns:
        The root block node.

    Raises:
        KeyValueParseError: On malformed input or when the document has no
            top-level block.
    """
    document = parse_document(text)
    for child in document.children:
        if child.has_children:
            return child
    raise KeyValueParseError("document has no top-level block")


def load(fp: TextIO) -> KeyValueNode:
    """Parses a text stream, see :func:`loads`."""
    return loads(fp.read())


def load_file(path: Path) -> KeyValueNode:
    """Reads and parses a KeyValues file.

    The file is opened for plain shared reading (never locked) since the
    Steam client may be writing it at the same time.

    Args:
        path: File to read.

    Returns:
        The root block node.

    Raises:
        OSError: If the file cannot be read.
        KeyValueParseError: If its contents are malformed.
    """
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return load(f)
