"""FLT document: header metadata plus the ordered body lines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence

from flt.runtime import telemetry

from . import codec
from .constants import (
    DC_TERMS,
    DEFAULT_GENERATOR,
    DEFAULT_VERSION,
    MAX_LINE_LENGTH,
    MAX_VERSION,
    MEDIA_TYPE,
    MIN_VERSION,
    MetaType,
)
from .errors import FormatError, VocabularyError
from .features import Features
from .lines import DCLine, Line, MetaLine, TextLine, is_text
from .plugin import Plugin, PluginRegistry

if TYPE_CHECKING:
    from .map import Map


class Document:
    """Main FLT document.

    Header metadata (doctype, version, features, generator) is pulled out of
    the parsed lines on construction; Dublin Core lines stay in ``lines``.
    ``lines`` is a plain list and may be edited directly; call ``touch`` after
    structural edits so that maps built earlier notice the change.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        *,
        lines: Optional[Iterable[Line]] = None,
    ) -> None:
        self.version: int = DEFAULT_VERSION
        self.generator: str = DEFAULT_GENERATOR
        self._features = Features()
        self.revision = 0
        self.plugins = PluginRegistry(self)

        parsed: List[Line] = codec.parse(source) if source else list(lines or ())
        with telemetry.span(
            "document::build",
            component="document",
            metadata={"lines": len(parsed)},
        ):
            self.lines: List[Line] = self._apply_metadata(parsed)

    @classmethod
    def from_source(cls, source: str) -> "Document":
        return cls(source)

    @property
    def doctype(self) -> str:
        return MEDIA_TYPE

    @property
    def features(self) -> Features:
        return self._features

    @property
    def header(self) -> codec.Header:
        return codec.Header(
            doctype=self.doctype, version=self.version, features=self._features
        )

    def _apply_metadata(self, lines: Sequence[Line]) -> List[Line]:
        kept: List[Line] = []
        for line in lines:
            if not isinstance(line, MetaLine):
                kept.append(line)
                continue
            if line.meta_type is MetaType.DOCTYPE:
                if line.content != self.doctype:
                    raise FormatError("Not an FLT document")
            elif line.meta_type is MetaType.VERSION:
                self.version = line.content
                if not MIN_VERSION <= self.version <= MAX_VERSION:
                    telemetry.record_event(
                        "document.version.unsupported",
                        level="warning",
                        data={"version": self.version},
                    )
            elif line.meta_type is MetaType.FEATURES:
                self._features.value = int(line.content)
            elif line.meta_type is MetaType.GENERATOR:
                self.generator = line.content
            elif line.meta_type is MetaType.DCTERM:
                if not self._features.dcmeta:
                    raise FormatError(
                        "Dublin core metadata is present, "
                        "but not enabled for this document"
                    )
                kept.append(line)
            else:
                kept.append(line)
        return kept

    def to_source(self, *, max_line_length: int = MAX_LINE_LENGTH) -> str:
        """Render the document back to FLT source."""

        return codec.render(self.lines, self.header, max_line_length=max_line_length)

    def __str__(self) -> str:
        return self.to_source()

    def touch(self) -> int:
        """Record a structural change to ``lines``; returns the new revision."""

        self.revision += 1
        return self.revision

    @property
    def text_lines(self) -> List[TextLine]:
        return [line for line in self.lines if is_text(line)]

    @property
    def text(self) -> str:
        return "".join(line.text for line in self.text_lines)

    def map(self) -> "Map":
        from .map import Map

        return Map(self)

    def _check_dc(self, term: str) -> None:
        if not self._features.dcmeta:
            raise FormatError("Dublin core metadata is not enabled for this document")
        if term not in DC_TERMS:
            raise VocabularyError(term)

    def add_dc(self, term: str, value: Optional[str] = None) -> None:
        """Append a Dublin Core entry; a ``None`` value only validates."""

        self._check_dc(term)
        if value is None:
            return
        self.lines.append(DCLine(term=term, value=value))
        self.touch()
        telemetry.record_event("document.dc.add", data={"term": term})

    def set_dc(self, term: str, values: str | Iterable[str] | None = None) -> None:
        """Replace every entry for ``term``; empty or ``None`` just removes."""

        if values is None:
            values = []
        elif isinstance(values, str):
            values = [values]
        self.lines = [
            line
            for line in self.lines
            if not (isinstance(line, DCLine) and line.term == term)
        ]
        self.touch()
        for value in values:
            self.add_dc(term, value)

    def get_dc(self, term: str) -> List[str]:
        """Values for ``term`` in document order."""

        self._check_dc(term)
        # full scan per call; fine until documents carry large DC sets
        return [
            line.value
            for line in self.lines
            if isinstance(line, DCLine) and line.term == term
        ]

    def use(self, plugin: Plugin | type[Plugin], *setup: Any) -> Plugin:
        """Attach a plugin and run its setup hook once with ``setup``."""

        return self.plugins.attach(plugin, *setup)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke an attached plugin method with this document as receiver."""

        return self.plugins.call(name, *args, **kwargs)


__all__ = ["Document"]
