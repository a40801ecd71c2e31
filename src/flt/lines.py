"""Line model: one dataclass per logical line variant.

Every line carries its 1-based source line number (0 when synthesized) and
a ``Bitfield`` of flags. Named flag ranges are declared on the bitfield when
the line is built, so ``line.flags.get("bold")`` and ``line.bold`` agree.
Fields that only exist for some typed lines (``align``, ``visual_break``,
``destination``, ``header``) raise ``AttributeError`` elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Optional, TypeGuard

from .bitfield import Bitfield
from .constants import (
    D_HEADER,
    DC_TERMS,
    FLAG_WIDTH,
    L_BOLD,
    L_ITALIC,
    L_MONO,
    L_RESET,
    L_STRIKEOUT,
    L_SUBTEXT,
    L_SUPERTEXT,
    L_UNDERLINE,
    MASK_ALIGN,
    MASK_DESTINATION,
    MASK_LINE_TYPE,
    VISUAL_BREAK,
    Align,
    Destination,
    LineKind,
    LineType,
    MetaType,
    bit_offset,
)
from .errors import FLTNotImplementedError, VocabularyError


class FlagField:
    """Descriptor mapping an attribute onto a named range of ``line.flags``."""

    def __init__(
        self,
        mask: int,
        width: int = 1,
        *,
        line_types: Optional[frozenset[LineType]] = None,
        enum: Optional[type] = None,
    ) -> None:
        self.offset = bit_offset(mask)
        self.width = width
        self.line_types = line_types
        self.enum = enum
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def applies(self, line: "Line") -> bool:
        if self.line_types is None:
            return True
        return getattr(line, "line_type", None) in self.line_types

    def __get__(self, obj: Optional["Line"], owner: type) -> Any:
        if obj is None:
            return self
        try:
            raw = obj.flags.get(self.name)
        except KeyError:
            raise AttributeError(
                f"{type(obj).__name__} has no '{self.name}' flag"
            ) from None
        if self.enum is not None:
            try:
                return self.enum(raw)
            except ValueError:
                return raw
        if self.width == 1:
            return bool(raw)
        return raw

    def __set__(self, obj: "Line", value: Any) -> None:
        if not obj.flags.has(self.name):
            raise AttributeError(f"{type(obj).__name__} has no '{self.name}' flag")
        obj.flags.set(self.name, int(value))


def _flag_fields(cls: type) -> Iterator[FlagField]:
    seen: set[str] = set()
    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            if isinstance(attr, FlagField) and name not in seen:
                seen.add(name)
                yield attr


def render_content(content: Any, *, what: str = "typed") -> str:
    """Render a scalar payload value the way the codec writes it."""

    if content is None:
        return ""
    if isinstance(content, bool):
        return "true" if content else "false"
    if isinstance(content, int):
        return format(content, "x")
    if isinstance(content, float):
        if content.is_integer():
            return format(int(content), "x")
        return str(content)
    if isinstance(content, Bitfield):
        return content.hex()
    if isinstance(content, str):
        return content
    raise FLTNotImplementedError(
        f"Unknown {what} content object: {type(content).__name__}"
    )


@dataclass(eq=False)
class Line:
    """Ancestor of every line variant; never instantiated directly."""

    line_no: int = 0
    flags: Bitfield = field(default_factory=Bitfield)

    kind: ClassVar[LineKind]

    type = FlagField(MASK_LINE_TYPE, 2, enum=LineKind)
    reset = FlagField(L_RESET)

    def __post_init__(self) -> None:
        if not isinstance(self.flags, Bitfield):
            self.flags = Bitfield(value=self.flags)
        for flag in _flag_fields(type(self)):
            if flag.applies(self):
                self.flags.define(flag.name, flag.offset, flag.width)
        self.type = self.kind

    def payload(self) -> str:
        """Content rendered after the flag prefix (unescaped)."""

        return ""

    def key(self) -> tuple[Any, ...]:
        """Identity used for structural comparison; ignores ``line_no``."""

        return (type(self).__name__, self.flags.value, self.payload())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.key() == other.key()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        output = self.flags.hex(FLAG_WIDTH)
        payload = self.payload()
        if payload:
            output += f" {payload}"
        return output


@dataclass(eq=False)
class TextLine(Line):
    """A run of text sharing one set of style flags."""

    text: str = ""

    kind: ClassVar[LineKind] = LineKind.TEXT

    italic = FlagField(L_ITALIC)
    bold = FlagField(L_BOLD)
    underline = FlagField(L_UNDERLINE)
    strikeout = FlagField(L_STRIKEOUT)
    supertext = FlagField(L_SUPERTEXT)
    subtext = FlagField(L_SUBTEXT)
    mono = FlagField(L_MONO)

    def __post_init__(self) -> None:
        self.text = "" if self.text is None else str(self.text)
        super().__post_init__()

    @property
    def length(self) -> int:
        return len(self.text)

    def payload(self) -> str:
        return self.text


_BLOCK_TYPES = frozenset({LineType.SECTION, LineType.PARAGRAPH})


@dataclass(eq=False)
class TypedLine(Line):
    """A structural or annotation line selected by ``line_type``."""

    line_type: LineType = LineType.NOOP
    content: Any = None

    kind: ClassVar[LineKind] = LineKind.TYPED

    align = FlagField(MASK_ALIGN, 2, line_types=_BLOCK_TYPES, enum=Align)
    visual_break = FlagField(VISUAL_BREAK, line_types=frozenset({LineType.SECTION}))
    destination = FlagField(
        MASK_DESTINATION,
        4,
        line_types=frozenset({LineType.DESTINATION}),
        enum=Destination,
    )
    header = FlagField(D_HEADER, line_types=frozenset({LineType.DESTINATION}))

    def __post_init__(self) -> None:
        self.line_type = LineType(self.line_type)
        super().__post_init__()

    def extra(self) -> str:
        return render_content(self.content, what="typed")

    def payload(self) -> str:
        output = format(self.line_type, "x")
        extra = self.extra()
        if extra:
            output += f" {extra}"
        return output


@dataclass(eq=False)
class BlobLine(TypedLine):
    """Inline binary data: a media type plus a base64 payload."""

    media_type: str = ""
    data: str = ""

    def __post_init__(self) -> None:
        self.line_type = LineType.BLOB
        super().__post_init__()

    def extra(self) -> str:
        return f"{self.media_type} {self.data}"


@dataclass(eq=False)
class MetaLine(Line):
    """Document metadata entry selected by ``meta_type``."""

    meta_type: MetaType = MetaType.DOCTYPE
    content: Any = None

    kind: ClassVar[LineKind] = LineKind.META

    def __post_init__(self) -> None:
        self.meta_type = MetaType(self.meta_type)
        super().__post_init__()

    def extra(self) -> str:
        return render_content(self.content, what="metadata")

    def payload(self) -> str:
        output = format(self.meta_type, "x")
        extra = self.extra()
        if extra:
            output += f" {extra}"
        return output


@dataclass(eq=False)
class DCLine(MetaLine):
    """One Dublin Core ``term value`` pair."""

    term: str = ""
    value: str = ""

    def __post_init__(self) -> None:
        if self.term not in DC_TERMS:
            raise VocabularyError(self.term)
        self.meta_type = MetaType.DCTERM
        super().__post_init__()

    def extra(self) -> str:
        return f"{self.term} {self.value}"


def is_text(line: Line) -> TypeGuard[TextLine]:
    return isinstance(line, TextLine)


def is_typed(line: Line, *line_types: LineType) -> TypeGuard[TypedLine]:
    if not isinstance(line, TypedLine):
        return False
    return not line_types or line.line_type in line_types


__all__ = [
    "FlagField",
    "Line",
    "TextLine",
    "TypedLine",
    "BlobLine",
    "MetaLine",
    "DCLine",
    "render_content",
    "is_text",
    "is_typed",
]
