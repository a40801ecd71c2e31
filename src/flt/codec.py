"""Parse FLT source into lines and render lines back to FLT source.

Physical lines look like ``<hex flags>[ <content>]``. A physical line whose
flags are exactly zero continues the previous logical line; the renderer
produces such lines when an encoded line exceeds ``MAX_LINE_LENGTH``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from flt.runtime import telemetry

from .bitfield import Bitfield
from .constants import (
    CONTINUATION_PREFIX,
    DEFAULT_GENERATOR,
    DEFAULT_VERSION,
    MAX_LINE_LENGTH,
    MEDIA_TYPE,
    LineKind,
    LineType,
    MetaType,
)
from .errors import (
    FLTError,
    FLTNotImplementedError,
    InternalSyntaxError,
    LineError,
    LineSyntaxError,
    LineTypeError,
)
from .features import Features
from .lines import BlobLine, DCLine, Line, MetaLine, TextLine, TypedLine

_NEWLINE = re.compile(r"\r*\n\r*")
_IGNORED = re.compile(r"^\s*(?:(?:#|//).*)?$")
_PHYSICAL = re.compile(r"^\s*([0-9a-fA-F]+)(?: (.*))?$", re.DOTALL)
_NUM_PREFIX = re.compile(r"^(.+?)(?: (.*))?$", re.DOTALL)
_BLOB = re.compile(r"^(.+/.+?) (.+)$", re.DOTALL)
_DC = re.compile(r"^(\w+) (.+)$", re.DOTALL)
_UNESCAPE = re.compile(r"\\[\\n]")
_ESCAPE = re.compile(r"[\\\n]")

_PLAIN_TYPES = frozenset(
    {LineType.NOOP, LineType.SECTION, LineType.PARAGRAPH, LineType.DESTINATION}
)
_OPTIONAL_CONTENT_TYPES = frozenset(
    {LineType.HINT, LineType.LINK, LineType.ANCHOR, LineType.IMAGE}
)


@dataclass(slots=True)
class PhysicalLine:
    """A logical line before dispatch, possibly merged from continuations."""

    line_no: int
    flags: Bitfield
    content: str = ""


@dataclass(slots=True)
class Header:
    """Metadata synthesized at the top of every rendered document."""

    doctype: str = MEDIA_TYPE
    version: int = DEFAULT_VERSION
    features: Features = field(default_factory=Features)


def escape(text: str) -> str:
    return _ESCAPE.sub(lambda m: "\\\\" if m.group(0) == "\\" else "\\n", text)


def unescape(text: str) -> str:
    return _UNESCAPE.sub(lambda m: "\\" if m.group(0) == "\\\\" else "\n", text)


def split_num_prefix(text: Optional[str], radix: int = 16) -> tuple[int, Optional[str]]:
    """Peel a numeric prefix off ``text``; returns ``(number, rest)``."""

    match = _NUM_PREFIX.match(text or "")
    if not match:
        raise InternalSyntaxError("Invalid numeric prefix")
    try:
        number = int(match.group(1), radix)
    except ValueError as exc:
        raise InternalSyntaxError(
            f"Invalid numeric prefix: {match.group(1)!r}"
        ) from exc
    return number, match.group(2)


def _hex(text: Optional[str], line_no: int, what: str) -> int:
    try:
        return int((text or "").strip(), 16)
    except ValueError:
        raise LineSyntaxError(line_no, f"Invalid {what}: {text!r}") from None


def split_physical(source: str) -> List[PhysicalLine]:
    """Split, filter and merge continuation lines; no unescaping yet."""

    merged: List[PhysicalLine] = []
    for index, raw in enumerate(_NEWLINE.split(source)):
        line_no = index + 1
        if _IGNORED.match(raw):
            continue
        match = _PHYSICAL.match(raw)
        if not match:
            _report(line_no, raw)
            raise LineSyntaxError(line_no, "Malformed line structure", content=raw)
        flags = Bitfield(value=match.group(1))
        content = match.group(2) or ""
        if merged and flags.value == 0:
            merged[-1].content += content
        else:
            merged.append(PhysicalLine(line_no, flags, content))
    return merged


def decode_line(line_no: int, flags: Bitfield, content: str = "") -> Line:
    """Build the line variant selected by the ``type`` bits of ``flags``."""

    flags.define("type", 0, 2)
    kind = flags.get("type")
    if kind == LineKind.TEXT:
        return TextLine(line_no, flags, content)
    if kind == LineKind.TYPED:
        return _decode_typed(line_no, flags, content)
    if kind == LineKind.META:
        return _decode_meta(line_no, flags, content)
    raise LineTypeError(line_no, f"Unknown line type: {kind}")


def _decode_typed(line_no: int, flags: Bitfield, content: str) -> Line:
    prefix, rest = split_num_prefix(content)
    try:
        line_type = LineType(prefix)
    except ValueError:
        raise LineTypeError(line_no, f"Unknown typed line: {prefix:x}") from None

    if line_type in _PLAIN_TYPES:
        return TypedLine(line_no, flags, line_type)
    if line_type in _OPTIONAL_CONTENT_TYPES:
        return TypedLine(line_no, flags, line_type, rest or None)
    if line_type is LineType.TABLE:
        return TypedLine(line_no, flags, line_type, _hex(rest, line_no, "table size"))
    # LineType.BLOB
    match = _BLOB.match(rest or "")
    if not match:
        raise LineSyntaxError(line_no, "Invalid blob definition")
    return BlobLine(line_no, flags, media_type=match.group(1), data=match.group(2))


def _decode_meta(line_no: int, flags: Bitfield, content: str) -> Line:
    prefix, rest = split_num_prefix(content)
    if prefix in (MetaType.DOCTYPE, MetaType.GENERATOR):
        return MetaLine(line_no, flags, MetaType(prefix), rest)
    if prefix == MetaType.VERSION:
        version = _hex(rest, line_no, "version")
        return MetaLine(line_no, flags, MetaType.VERSION, version)
    if prefix == MetaType.FEATURES:
        try:
            features = Features(rest or "0")
        except ValueError:
            raise LineSyntaxError(line_no, f"Invalid features: {rest!r}") from None
        return MetaLine(line_no, flags, MetaType.FEATURES, features)
    if prefix == MetaType.DCTERM:
        match = _DC.match(rest or "")
        if not match:
            raise LineSyntaxError(line_no, "Malformed dublin core metadata definition")
        return DCLine(
            line_no,
            flags,
            term=match.group(1),
            value=match.group(2).strip(),
        )
    raise FLTNotImplementedError(f"Unknown metadata type: {prefix:x}")


def parse(source: str) -> List[Line]:
    """Parse FLT source text into an ordered list of lines."""

    with telemetry.span(
        "codec::parse",
        component="codec",
        metadata={"chars": len(source)},
    ) as handle:
        lines: List[Line] = []
        for physical in split_physical(source):
            content = unescape(physical.content)
            try:
                lines.append(decode_line(physical.line_no, physical.flags, content))
            except LineError as exc:
                if exc.content is None:
                    exc.content = content
                _report(physical.line_no, content)
                raise
            except InternalSyntaxError as exc:
                _report(physical.line_no, content)
                raise LineSyntaxError(
                    physical.line_no, str(exc), content=content
                ) from exc
            except FLTError as exc:
                if exc.line_no is None:
                    exc.line_no = physical.line_no
                    exc.content = content
                _report(physical.line_no, content)
                raise
            except ValueError as exc:
                _report(physical.line_no, content)
                raise LineSyntaxError(
                    physical.line_no, str(exc), content=content
                ) from exc
        handle.add_metadata("lines", len(lines))
        return lines


def _report(line_no: int, content: str) -> None:
    telemetry.record_event(
        "codec.parse.error",
        level="error",
        data={"line_no": line_no, "content": content},
    )


def wrap(encoded: str, max_line_length: int = MAX_LINE_LENGTH) -> List[str]:
    """Split an encoded line into chunks, continuations flagged ``0000``."""

    if len(encoded) <= max_line_length:
        return [encoded]
    chunks = [
        encoded[start : start + max_line_length]
        for start in range(0, len(encoded), max_line_length)
    ]
    return [chunks[0]] + [f"{CONTINUATION_PREFIX} {chunk}" for chunk in chunks[1:]]


def header_lines(header: Header) -> List[Line]:
    return [
        MetaLine(0, Bitfield(), MetaType.DOCTYPE, header.doctype),
        MetaLine(0, Bitfield(), MetaType.VERSION, header.version),
        MetaLine(0, Bitfield(), MetaType.FEATURES, header.features.hex()),
        # always stamped with this library, never the parsed generator
        MetaLine(0, Bitfield(), MetaType.GENERATOR, DEFAULT_GENERATOR),
    ]


def order_lines(lines: Sequence[Line]) -> List[Line]:
    """Non-DC metadata, then DC lines sorted by term, then everything else."""

    meta = [
        line
        for line in lines
        if isinstance(line, MetaLine) and not isinstance(line, DCLine)
    ]
    dublin_core = sorted(
        (line for line in lines if isinstance(line, DCLine)), key=lambda line: line.term
    )
    body = [line for line in lines if not isinstance(line, MetaLine)]
    return meta + dublin_core + body


def render(
    lines: Iterable[Line],
    header: Optional[Header] = None,
    *,
    max_line_length: int = MAX_LINE_LENGTH,
) -> str:
    """Render lines, preceded by the synthesized header, to FLT source."""

    body = list(lines)
    with telemetry.span(
        "codec::render",
        component="codec",
        metadata={"lines": len(body)},
    ):
        ordered = header_lines(header or Header()) + order_lines(body)
        physical: List[str] = []
        for line in ordered:
            physical.extend(wrap(escape(str(line)), max_line_length))
        return "\n".join(physical)


__all__ = [
    "Header",
    "PhysicalLine",
    "escape",
    "unescape",
    "split_num_prefix",
    "split_physical",
    "decode_line",
    "parse",
    "wrap",
    "header_lines",
    "order_lines",
    "render",
]
