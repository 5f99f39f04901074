"""Comment-preserving configuration documents.

A document is an ordered list of elements, each either a full-line comment or
a group of dotted keys that share a top-level section. Groups are written as
block-style YAML, so a document keeps its comments and key order when it is
edited programmatically and written back to disk.
"""

import copy
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pluginkit.config.exceptions import (
    DocumentParseError,
    InvalidKey,
    InvalidKeyQuoting,
)
from pluginkit.system import path_utils

KEY_PATTERN = re.compile(r"^[\w'. -]+$")
SECTION_SEPARATOR = "."
QUOTE = "'"

_MISSING = object()


class _SourceFloat(float):
    """Float that remembers how it was written, so ``1.10`` is not read back as ``1.1``."""

    def __new__(cls, value: float, text: str):
        instance = super().__new__(cls, value)
        instance.text = text
        return instance

    def __getnewargs__(self):
        return float(self), self.text


class _DocumentLoader(yaml.SafeLoader):
    pass


class _DocumentDumper(yaml.SafeDumper):
    pass


def _construct_float(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> float:
    return _SourceFloat(loader.construct_yaml_float(node), node.value)


def _represent_source_float(dumper: yaml.SafeDumper, data: _SourceFloat) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:float", data.text)


_DocumentLoader.add_constructor("tag:yaml.org,2002:float", _construct_float)
_DocumentDumper.add_representer(_SourceFloat, _represent_source_float)


def dump_yaml(data: Any) -> str:
    """Render values read from a document as block-style YAML."""
    return yaml.dump(
        data,
        Dumper=_DocumentDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def split_key(key: str) -> tuple[str, ...]:
    """Split a dotted key into its section names, validating it on the way.

    Sections wrapped in single quotes may contain dots, which are then taken
    literally: ``Messages.'no.permission'`` has two sections.

    Raises:
        InvalidKey: If the key is empty, has an empty section or a disallowed character
        InvalidKeyQuoting: If a quoted section is not wrapped in exactly one pair of quotes
    """
    if not isinstance(key, str) or not key:
        raise InvalidKey(str(key), "key must be a non-empty string")
    if not KEY_PATTERN.fullmatch(key):
        raise InvalidKey(key, "only letters, digits, '_', \"'\", '.', ' ' and '-' are allowed")

    raw_sections = []
    current = []
    quoted = False

    for char in key:
        if char == QUOTE:
            quoted = not quoted
        if char == SECTION_SEPARATOR and not quoted:
            raw_sections.append("".join(current))
            current = []
        else:
            current.append(char)

    if quoted:
        raise InvalidKeyQuoting(key, "unterminated quote")
    raw_sections.append("".join(current))

    sections = []
    for raw in raw_sections:
        if not raw:
            raise InvalidKey(key, "empty section")
        if QUOTE in raw:
            if raw.count(QUOTE) != 2 or not (raw.startswith(QUOTE) and raw.endswith(QUOTE)):
                raise InvalidKeyQuoting(
                    key, f"section {raw} must start and end with its only two quotes"
                )
            raw = raw[1:-1]
            if not raw:
                raise InvalidKey(key, "empty quoted section")
        sections.append(raw)

    return tuple(sections)


def format_section(name: str) -> str:
    """Quote a section name when it contains the section separator."""
    return f"{QUOTE}{name}{QUOTE}" if SECTION_SEPARATOR in name else name


def join_key(sections: tuple[str, ...]) -> str:
    return SECTION_SEPARATOR.join(format_section(section) for section in sections)


def _leaves(sections: tuple[str, ...], value: Any) -> Iterator[tuple[str, Any]]:
    """Yield (canonical key, leaf value) pairs, expanding non-empty mappings."""
    if isinstance(value, Mapping) and value:
        for name, child in value.items():
            child_key = join_key(sections) + SECTION_SEPARATOR + format_section(str(name))
            yield from _leaves(split_key(child_key), child)
    else:
        yield join_key(sections), value


def _overlaps(sections: tuple[str, ...], other: tuple[str, ...]) -> bool:
    """True if one key is a strict parent of the other."""
    shorter, longer = sorted((sections, other), key=len)
    return len(shorter) < len(longer) and longer[: len(shorter)] == shorter


def _nest(entries: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Build a nested mapping from dotted entries; later entries win on conflicts."""
    tree: dict[str, Any] = {}
    for key, value in entries:
        sections = split_key(key)
        node = tree
        for section in sections[:-1]:
            child = node.get(section)
            if not isinstance(child, dict):
                child = {}
                node[section] = child
            node = child
        node[sections[-1]] = copy.deepcopy(value)
    return tree


@dataclass(frozen=True)
class Comment:
    """A full-line comment, stored without its leading ``#``."""

    text: str


@dataclass(eq=False)
class MappingGroup:
    """Dotted keys sharing one top-level section, written together as one YAML block."""

    entries: dict[str, Any] = field(default_factory=dict)

    def contains_section(self, section: str) -> bool:
        return any(split_key(key)[0] == section for key in self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingGroup):
            return NotImplemented
        return list(self.entries.items()) == list(other.entries.items())

    def __len__(self) -> int:
        return len(self.entries)


Element = Comment | MappingGroup


class ConfigurationDocument:
    """Ordered, comment-aware key/value document.

    Every mutation re-renders the serialized text and rebuilds the lookup
    view, so reads always reflect the latest edit.
    """

    def __init__(self) -> None:
        self._elements: list[Element] = []
        self._text = ""
        self._view: dict[str, Any] = {}

    @classmethod
    def parse(cls, text: str) -> "ConfigurationDocument":
        """Parse raw document text.

        Lines starting with ``#`` become comments. Every other run of lines is
        parsed as one YAML mapping block whose keys are added in order.

        Raises:
            DocumentParseError: If a mapping block is malformed or uses an invalid key
        """
        document = cls()
        block: list[str] = []
        block_start = 1

        for number, line in enumerate(text.splitlines(), start=1):
            stripped = line.lstrip()
            if stripped.startswith("#"):
                document._consume_block(block, block_start)
                block = []
                comment = stripped[1:]
                if comment.startswith(" "):
                    comment = comment[1:]
                document._elements.append(Comment(comment))
            else:
                if not block:
                    block_start = number
                block.append(line)

        document._consume_block(block, block_start)
        document._refresh()
        return document

    @classmethod
    def load(cls, path: Path) -> "ConfigurationDocument":
        """Read and parse a UTF-8 document from disk.

        Raises:
            FileNotFoundError: If the file does not exist
            DocumentParseError: If the file is not valid UTF-8 or not a valid document
        """
        try:
            text = path_utils.read_text(path)
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"{path} is not valid UTF-8: {e}") from e
        if text is None:
            raise FileNotFoundError(f"No configuration file at {path}")
        return cls.parse(text)

    def save(self, path: Path) -> None:
        """Write the serialized document to disk, creating parent directories."""
        path_utils.write_text(self._text, path)

    def _consume_block(self, lines: list[str], start: int) -> None:
        block = "\n".join(lines)
        if not block.strip():
            return

        # Pairs are constructed one by one from the composed node, so a
        # top-level section written twice keeps both occurrences in order.
        loader = _DocumentLoader(block)
        try:
            node = loader.get_single_node()
            if node is None:
                return
            if not isinstance(node, yaml.MappingNode):
                raise DocumentParseError(f"Expected a mapping block, found a {node.id}", start)

            loader.flatten_mapping(node)
            pairs = [
                (
                    loader.construct_object(key_node, deep=True),
                    loader.construct_object(value_node, deep=True),
                    start + key_node.start_mark.line,
                )
                for key_node, value_node in node.value
            ]
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line = start + mark.line if mark is not None else start
            problem = getattr(e, "problem", None) or str(e)
            raise DocumentParseError(f"Malformed mapping block: {problem}", line) from e
        finally:
            loader.dispose()

        for key, value, line in pairs:
            try:
                self._insert(str(key), value)
            except InvalidKey as e:
                raise DocumentParseError(str(e), line) from e

    def _replace_overlapping(self, canonical: str, value: Any) -> bool:
        """Replace entries that are a parent or a child of ``canonical``.

        The new entry takes the place of the first overlapping one. Groups
        left empty by the replacement are dropped.

        Returns:
            bool: True if an overlapping entry was found
        """
        target = split_key(canonical)
        placed = False
        emptied = []

        for element in self._elements:
            if not isinstance(element, MappingGroup):
                continue
            overlapping = [
                entry for entry in element.entries if _overlaps(split_key(entry), target)
            ]
            if not overlapping:
                continue

            entries = {}
            for entry, entry_value in element.entries.items():
                if entry not in overlapping:
                    entries[entry] = entry_value
                elif not placed:
                    entries[canonical] = value
                    placed = True
            element.entries = entries
            if not entries:
                emptied.append(element)

        self._elements = [
            element
            for element in self._elements
            if not any(element is group for group in emptied)
        ]
        return placed

    def _insert(self, key: str, value: Any) -> None:
        leaves = list(_leaves(split_key(key), value))

        for canonical, leaf in leaves:
            existing = next(
                (
                    element
                    for element in self._elements
                    if isinstance(element, MappingGroup) and canonical in element.entries
                ),
                None,
            )
            if existing is not None:
                existing.entries[canonical] = leaf
                continue
            if self._replace_overlapping(canonical, leaf):
                continue

            section = split_key(canonical)[0]
            last = self._elements[-1] if self._elements else None
            # Only the most recent group is considered for joining.
            if isinstance(last, MappingGroup) and last.contains_section(section):
                last.entries[canonical] = leaf
            else:
                self._elements.append(MappingGroup({canonical: leaf}))

    def _refresh(self) -> None:
        self._text = self._render()
        self._view = _nest(
            (key, value)
            for element in self._elements
            if isinstance(element, MappingGroup)
            for key, value in element.entries.items()
        )

    def _render(self) -> str:
        parts = []
        for element in self._elements:
            if isinstance(element, Comment):
                parts.append(f"# {element.text}\n" if element.text else "#\n")
            elif element.entries:
                parts.append(dump_yaml(_nest(element.entries.items())) + "\n")

        text = "".join(parts)
        return text.rstrip("\n") + "\n" if text else ""

    def add(self, key: str, value: Any) -> None:
        """Set a key, keeping it next to related keys where possible.

        An existing key is updated in place. A key that is the parent or the
        child of existing keys replaces them at the position of the first one.
        Any other key joins the last mapping group if that group already holds
        the key's top-level section; otherwise it starts a new group at the end
        of the document.

        Raises:
            InvalidKey: If the key uses characters outside the allowed set
            InvalidKeyQuoting: If a quoted section is malformed
        """
        self._insert(key, value)
        self._refresh()

    def remove(self, key: str) -> bool:
        """Remove a key and anything nested under it.

        The group that held the key stays in place even if it becomes empty.

        Returns:
            bool: True if at least one entry was removed
        """
        sections = split_key(key)
        removed = False

        for element in self._elements:
            if not isinstance(element, MappingGroup):
                continue
            for entry in list(element.entries):
                if split_key(entry)[: len(sections)] == sections:
                    del element.entries[entry]
                    removed = True

        if removed:
            self._refresh()
        return removed

    def add_comment(self, text: str) -> None:
        """Append a comment; multi-line text becomes one comment per line."""
        for line in text.splitlines() or [""]:
            self._elements.append(Comment(line))
        self._refresh()

    def serialize(self) -> str:
        return self._text

    @property
    def text(self) -> str:
        return self._text

    @property
    def elements(self) -> tuple[Element, ...]:
        """Snapshot of the document elements in order."""
        return tuple(
            MappingGroup(dict(element.entries)) if isinstance(element, MappingGroup) else element
            for element in self._elements
        )

    def keys(self) -> list[str]:
        """All entry keys in document order."""
        return [
            key
            for element in self._elements
            if isinstance(element, MappingGroup)
            for key in element.entries
        ]

    def to_dict(self) -> dict[str, Any]:
        """Nested mapping of every value in the document."""
        return copy.deepcopy(self._view)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, or ``default`` if the key is absent or invalid.

        Keys may address a whole section, in which case a nested mapping is returned.
        """
        try:
            sections = split_key(key)
        except InvalidKey:
            return default

        node: Any = self._view
        for section in sections:
            if not isinstance(node, dict) or section not in node:
                return default
            node = node[section]
        return node

    def contains(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def get_string(self, key: str, default: str | None = None) -> str | None:
        value = self.get(key)
        if isinstance(value, _SourceFloat):
            return value.text
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str | int | float):
            return str(value)
        return default

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return default

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self.get(key)
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if value.is_integer() else default
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return default
        return default

    def get_float(self, key: str, default: float | None = None) -> float | None:
        value = self.get(key)
        if isinstance(value, bool):
            return default
        if isinstance(value, int | float):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return default
        return default

    def get_list(self, key: str, default: list[Any] | None = None) -> list[Any] | None:
        value = self.get(key)
        return list(value) if isinstance(value, list) else default

    def get_section(
        self, key: str, default: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        value = self.get(key)
        return copy.deepcopy(value) if isinstance(value, dict) else default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationDocument):
            return NotImplemented
        return self._elements == other._elements

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigurationDocument(elements={len(self._elements)}, keys={len(self.keys())})"
