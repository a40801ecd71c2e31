"""Offset-indexed view over a document's text.

The map concatenates the text of every ``TextLine`` and partitions it into
six families of ranges: one per text line, plus sections, paragraphs,
notes, table cells and headings. Ranges inside a family are sorted, never
overlap and are never empty.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from flt.runtime import telemetry

from .constants import Destination, LineType
from .errors import StaleMapError
from .lines import TextLine, TypedLine, is_text, is_typed
from .map_point import MapPoint

if TYPE_CHECKING:
    from .document import Document

POINT_KINDS = ("line", "section", "paragraph", "note", "cell", "heading")
# families a destination line can switch the text flow into
FLOW_KINDS = ("paragraph", "note", "cell", "heading")
_STRUCTURAL = (LineType.SECTION, LineType.PARAGRAPH, LineType.DESTINATION)


@dataclass(slots=True)
class MapRange:
    """``[offset, offset + length)`` plus the text lines that fill it."""

    offset: int
    length: int = 0
    lines: List[TextLine] = field(default_factory=list)

    @property
    def end(self) -> int:
        return self.offset + self.length

    def contains(self, offset: int) -> bool:
        return self.offset <= offset < self.end

    def extend(self, line: TextLine) -> None:
        self.length += line.length
        self.lines.append(line)


@dataclass(slots=True)
class MapPosition:
    """Every map point containing one offset; ``None`` where nothing does."""

    line: Optional[MapPoint] = None
    section: Optional[MapPoint] = None
    paragraph: Optional[MapPoint] = None
    note: Optional[MapPoint] = None
    cell: Optional[MapPoint] = None
    heading: Optional[MapPoint] = None

    def __iter__(self) -> Iterator[tuple[str, Optional[MapPoint]]]:
        for kind in POINT_KINDS:
            yield kind, getattr(self, kind)

    def as_dict(self) -> Dict[str, Optional[MapPoint]]:
        return dict(self)


def destination_kind(line: TypedLine) -> str:
    """Family a destination line opens; header-flagged cells are headings."""

    destination = line.destination
    if destination == Destination.HEAD:
        return "heading"
    if destination == Destination.CELL:
        return "heading" if line.header else "cell"
    if destination == Destination.NOTE:
        return "note"
    return "paragraph"


class _Builder:
    """Single pass over the document lines collecting open ranges."""

    def __init__(self) -> None:
        self.offset = 0
        self.families: Dict[str, List[MapRange]] = {kind: [] for kind in POINT_KINDS}
        self.current: Dict[str, MapRange] = {}
        self.active = {kind: False for kind in FLOW_KINDS}
        self.open("section")
        self.activate("paragraph")

    def open(self, kind: str) -> None:
        opened = MapRange(self.offset)
        self.families[kind].append(opened)
        self.current[kind] = opened

    def activate(self, kind: str) -> None:
        self.open(kind)
        self.active[kind] = True

    def deactivate_all(self) -> None:
        for kind in FLOW_KINDS:
            self.active[kind] = False

    def add_text(self, line: TextLine) -> None:
        own = MapRange(self.offset)
        own.extend(line)
        self.families["line"].append(own)
        self.current["section"].extend(line)
        for kind in FLOW_KINDS:
            if self.active[kind]:
                self.current[kind].extend(line)
        self.offset += line.length

    def add_typed(self, line: TypedLine) -> None:
        if line.line_type is LineType.SECTION:
            self.open("section")
            self.deactivate_all()
            self.activate("paragraph")
        elif line.line_type is LineType.PARAGRAPH:
            self.activate("paragraph")
        elif line.line_type is LineType.DESTINATION:
            self.deactivate_all()
            self.activate(destination_kind(line))

    def finish(self) -> Dict[str, List[MapRange]]:
        return {
            kind: [item for item in ranges if item.length > 0]
            for kind, ranges in self.families.items()
        }


class Map:
    """Feature map for one document snapshot.

    The map records the document revision it was built from. ``at`` rebuilds
    first when the document has been touched since; ``ensure_fresh(strict=
    True)`` raises ``StaleMapError`` instead.
    """

    def __init__(self, document: "Document") -> None:
        self.document = document
        self.revision = -1
        self._ranges: Dict[str, List[MapRange]] = {}
        self._starts: Dict[str, List[int]] = {}
        self.build()

    def build(self) -> None:
        with telemetry.span(
            "map::build",
            component="map",
            metadata={"lines": len(self.document.lines)},
        ) as handle:
            builder = _Builder()
            for line in self.document.lines:
                if is_text(line):
                    builder.add_text(line)
                elif is_typed(line, *_STRUCTURAL):
                    builder.add_typed(line)
            self._ranges = builder.finish()
            self._starts = {
                kind: [item.offset for item in ranges]
                for kind, ranges in self._ranges.items()
            }
            self.revision = self.document.revision
            handle.add_metadata("length", builder.offset)

    @property
    def stale(self) -> bool:
        return self.revision != self.document.revision

    def ensure_fresh(self, *, strict: bool = False) -> None:
        if not self.stale:
            return
        if strict:
            raise StaleMapError(
                f"Map built at revision {self.revision}, "
                f"document is at {self.document.revision}"
            )
        telemetry.record_event(
            "map.rebuild",
            data={"from": self.revision, "to": self.document.revision},
        )
        self.build()

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def length(self) -> int:
        return sum(line.length for line in self.document.text_lines)

    def ranges(self, kind: str) -> List[MapRange]:
        try:
            return list(self._ranges[kind])
        except KeyError:
            raise ValueError(f"Unknown map point kind '{kind}'") from None

    def points(self, kind: str) -> List[MapPoint]:
        return [self._point(kind, item) for item in self.ranges(kind)]

    @property
    def lines(self) -> List[MapPoint]:
        return self.points("line")

    @property
    def sections(self) -> List[MapPoint]:
        return self.points("section")

    @property
    def paragraphs(self) -> List[MapPoint]:
        return self.points("paragraph")

    @property
    def notes(self) -> List[MapPoint]:
        return self.points("note")

    @property
    def cells(self) -> List[MapPoint]:
        return self.points("cell")

    @property
    def headings(self) -> List[MapPoint]:
        return self.points("heading")

    def at(self, offset: int = 0) -> MapPosition:
        """Points of every family containing ``offset``."""

        self.ensure_fresh()
        position = MapPosition()
        for kind in POINT_KINDS:
            found = self._find(kind, offset)
            if found is not None:
                setattr(position, kind, self._point(kind, found))
        return position

    def _find(self, kind: str, offset: int) -> Optional[MapRange]:
        starts = self._starts[kind]
        if not starts or offset < 0:
            return None
        index = bisect_right(starts, offset) - 1
        if index < 0:
            return None
        candidate = self._ranges[kind][index]
        return candidate if candidate.contains(offset) else None

    def _point(self, kind: str, item: MapRange) -> MapPoint:
        return MapPoint(self, kind, item.offset, item.lines)


__all__ = [
    "Map",
    "MapPosition",
    "MapRange",
    "POINT_KINDS",
    "destination_kind",
]
