"""Exception hierarchy for parsing, assembling and rendering documents."""

from __future__ import annotations

from typing import Optional


class FLTError(Exception):
    """Base class for every error raised by this package.

    Errors raised while parsing carry the 1-based ``line_no`` and the raw
    ``content`` of the offending line; both stay ``None`` elsewhere.
    """

    line_no: Optional[int] = None
    content: Optional[str] = None


class FormatError(FLTError):
    """Document-level mismatch: wrong doctype, or DC metadata not enabled."""


class VocabularyError(FLTError, ValueError):
    """Raised for a Dublin Core term outside the recognized vocabulary."""

    def __init__(self, term: str) -> None:
        super().__init__(f"Invalid dublin core term: {term}")
        self.term = term


class PluginError(FLTError):
    """Raised when plugin methods collide or are missing."""


class InternalSyntaxError(FLTError):
    """Low-level helper failure, re-raised by the codec with a line number."""


class FLTNotImplementedError(FLTError, NotImplementedError):
    """Recognized but unhandled content shape."""


class StaleMapError(FLTError):
    """A map was used after its document changed structure."""


class LineError(FLTError):
    """Error tied to one line of FLT source."""

    def __init__(
        self, line_no: int, message: str, *, content: Optional[str] = None
    ) -> None:
        super().__init__(f"Line {line_no}: {message}")
        self.line_no = line_no
        self.reason = message
        self.content = content


class LineSyntaxError(LineError):
    """Malformed physical line or malformed blob / DC payload."""


class LineTypeError(LineError, TypeError):
    """Unknown line type or typed sub-type discriminant."""


__all__ = [
    "FLTError",
    "FormatError",
    "VocabularyError",
    "PluginError",
    "InternalSyntaxError",
    "FLTNotImplementedError",
    "StaleMapError",
    "LineError",
    "LineSyntaxError",
    "LineTypeError",
]
