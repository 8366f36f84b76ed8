"""CLA category file parser: text → CategoryTree + canonical ModelIndex.

File layout (blank lines are ignored everywhere):

    PSB <version>
    <numCategories> <numModels>
    <categoryName> <parentName> <modelCount>
    <modelId>            (modelCount lines)
    ...                  (one block per category)

Canonical order is the order model lines appear, category block by category
block. Categories without models still resolve full names for their children
but never occupy grid space.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeVar

from simmat.engine.errors import FormatError, ParentNotFound, ReadError, UnsupportedFormat

logger = logging.getLogger(__name__)

FORMAT_TAG = "PSB"
FORMAT_VERSION = 2
ROOT_CATEGORY = "0"
MISC_CATEGORY = "-1"
FULL_NAME_SEPARATOR = "__"

T = TypeVar("T")


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Result of a keyed lookup: either found with a value, or missing."""

    key: str
    value: T | None = None

    @property
    def found(self) -> bool:
        return self.value is not None

    @property
    def missing(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class Category:
    name: str
    parent_name: str
    full_name: str
    # Index among non-empty categories; None for categories without models
    position: int | None = None
    models: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.models

    @property
    def is_misc(self) -> bool:
        return self.name == MISC_CATEGORY

    def describe(self) -> str:
        return f"{self.name} child of {self.parent_name} ({self.full_name}) {len(self.models)} models"


@dataclass(frozen=True)
class ModelRecord:
    id: str
    canonical_position: int
    category_name: str


@dataclass(frozen=True)
class CategoryTree:
    """All categories by name (empty ones included) plus the non-empty order."""

    categories: dict[str, Category] = field(default_factory=dict)
    category_order: tuple[Category, ...] = ()

    @property
    def num_categories(self) -> int:
        return len(self.category_order)

    def find(self, name: str) -> Lookup[Category]:
        return Lookup(name, self.categories.get(name))

    def require(self, name: str) -> Category:
        lookup = self.find(name)
        if lookup.missing:
            raise FormatError(f"unknown category {name!r}", token=name)
        return lookup.value

    def __contains__(self, name: object) -> bool:
        return name in self.categories

    def __len__(self) -> int:
        return len(self.categories)


@dataclass(frozen=True)
class ModelIndex:
    """Models in canonical order; ``records[i]`` is the model at index ``i``."""

    records: tuple[ModelRecord, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {r.id: r for r in self.records})

    @property
    def num_models(self) -> int:
        return len(self.records)

    @property
    def positions(self) -> list[int]:
        return [r.canonical_position for r in self.records]

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self.records]

    def find(self, model_id: str) -> Lookup[ModelRecord]:
        return Lookup(model_id, self._by_id.get(model_id))

    def __getitem__(self, i: int) -> ModelRecord:
        return self.records[i]

    def __iter__(self) -> Iterator[ModelRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


class _ParseState:
    """Accumulator scoped to a single parse call."""

    def __init__(self, declared_categories: int) -> None:
        self.declared_categories = declared_categories
        self.categories: dict[str, Category] = {}
        self.order: list[Category] = []
        self.records: list[ModelRecord] = []

    @property
    def next_position(self) -> int:
        return len(self.records)


class _Lines:
    """Line cursor that skips blank lines and remembers the line number."""

    def __init__(self, text: str, source: str) -> None:
        self._lines = text.splitlines()
        self._i = 0
        self.source = source
        self.lineno = 0

    def next_nonblank(self) -> str | None:
        while self._i < len(self._lines):
            line = self._lines[self._i]
            self._i += 1
            if line.strip():
                self.lineno = self._i
                return line
        return None


def _to_int(token: str, what: str, source: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise FormatError(f"expected integer {what}", source=source, token=token) from None


def _full_name(name: str, parent: str, categories: dict[str, Category], source: str) -> str:
    if parent == ROOT_CATEGORY:
        return name
    lookup = Lookup(parent, categories.get(parent))
    if lookup.missing:
        raise ParentNotFound(
            f"category {name!r} has parent {parent!r} which does not exist",
            source=source,
            token=parent,
        )
    return lookup.value.full_name + FULL_NAME_SEPARATOR + name


def _parse_header(lines: _Lines) -> tuple[int, int]:
    src = lines.source
    header = lines.next_nonblank()
    if header is None:
        raise FormatError("empty category file", source=src)
    tokens = header.split()
    if not tokens or tokens[0] != FORMAT_TAG:
        raise FormatError(f"does not start with {FORMAT_TAG}", source=src, token=header.strip())
    if len(tokens) < 2:
        raise FormatError("missing format version", source=src, token=header.strip())
    version = _to_int(tokens[1], "format version", src)
    if version > FORMAT_VERSION:
        raise UnsupportedFormat(
            f"format {version} is not supported, highest supported format is {FORMAT_VERSION}",
            source=src,
            token=tokens[1],
        )

    counts = lines.next_nonblank()
    if counts is None:
        raise FormatError("missing category/model count line", source=src)
    tokens = counts.split()
    if len(tokens) < 2:
        raise FormatError("count line needs <numCategories> <numModels>", source=src, token=counts.strip())
    return _to_int(tokens[0], "category count", src), _to_int(tokens[1], "model count", src)


def _parse_block(line: str, lines: _Lines, state: _ParseState) -> None:
    src = lines.source
    tokens = line.split()
    if len(tokens) < 3:
        raise FormatError(
            f"line {lines.lineno}: category line needs <name> <parent> <modelCount>",
            source=src,
            token=line.strip(),
        )
    name, parent = tokens[0], tokens[1]
    if name in state.categories:
        raise FormatError(f"line {lines.lineno}: category {name!r} is declared twice", source=src, token=name)
    model_count = _to_int(tokens[2], "model count", src)
    full_name = _full_name(name, parent, state.categories, src)

    if model_count <= 0:
        state.categories[name] = Category(name=name, parent_name=parent, full_name=full_name)
        return

    if len(state.order) >= state.declared_categories:
        raise FormatError(
            f"too many categories, header declares {state.declared_categories}",
            source=src,
            token=name,
        )

    models: list[str] = []
    for _ in range(model_count):
        mid = lines.next_nonblank()
        if mid is None:
            raise FormatError(
                f"category {name!r} declares {model_count} models but the file ends after {len(models)}",
                source=src,
                token=name,
            )
        mid = mid.strip()
        models.append(mid)
        state.records.append(ModelRecord(mid, state.next_position, name))

    category = Category(
        name=name,
        parent_name=parent,
        full_name=full_name,
        position=len(state.order),
        models=tuple(models),
    )
    state.order.append(category)
    state.categories[name] = category


def parse_category_text(text: str, source: str = "<input>") -> tuple[CategoryTree, ModelIndex]:
    """Parse CLA text into a category tree and the canonical model index."""
    lines = _Lines(text, source)
    declared_categories, declared_models = _parse_header(lines)
    state = _ParseState(declared_categories)

    while (line := lines.next_nonblank()) is not None:
        _parse_block(line, lines, state)

    tree = CategoryTree(categories=state.categories, category_order=tuple(state.order))
    index = ModelIndex(records=tuple(state.records))

    if index.num_models != declared_models:
        logger.warning(
            "%s declares %d models, found %d",
            source,
            declared_models,
            index.num_models,
        )
    logger.info(
        "Read %d non-empty categories, %d model ids.",
        tree.num_categories,
        index.num_models,
    )
    return tree, index


def read_category_file(path: str | Path) -> tuple[CategoryTree, ModelIndex]:
    path = Path(path)
    logger.info("Reading category file %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReadError(f"unable to read category file: {e.strerror or e}", source=str(path)) from e
    except UnicodeDecodeError as e:
        raise FormatError(
            f"not valid UTF-8 at byte {e.start}",
            source=str(path),
            token=e.object[e.start : e.end].hex(),
        ) from e
    return parse_category_text(text, source=str(path))
