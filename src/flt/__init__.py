"""Codec, document model and text map for the FLT line-oriented format."""

from .bitfield import Bitfield, FieldSpec
from .codec import Header, escape, parse, render, unescape
from .constants import Align, Destination, LineKind, LineType, MetaType
from .document import Document
from .errors import (
    FLTError,
    FLTNotImplementedError,
    FormatError,
    InternalSyntaxError,
    LineError,
    LineSyntaxError,
    LineTypeError,
    PluginError,
    StaleMapError,
    VocabularyError,
)
from .features import Features
from .lines import BlobLine, DCLine, Line, MetaLine, TextLine, TypedLine
from .map import Map, MapPosition, MapRange
from .map_point import MapPoint
from .plugin import Plugin, PluginMethod, PluginRegistry

__all__ = [
    "Align",
    "Bitfield",
    "BlobLine",
    "DCLine",
    "Destination",
    "Document",
    "FLTError",
    "FLTNotImplementedError",
    "Features",
    "FieldSpec",
    "FormatError",
    "Header",
    "InternalSyntaxError",
    "Line",
    "LineError",
    "LineKind",
    "LineSyntaxError",
    "LineType",
    "LineTypeError",
    "Map",
    "MapPoint",
    "MapPosition",
    "MapRange",
    "MetaLine",
    "MetaType",
    "Plugin",
    "PluginError",
    "PluginMethod",
    "PluginRegistry",
    "StaleMapError",
    "TextLine",
    "TypedLine",
    "VocabularyError",
    "escape",
    "parse",
    "render",
    "unescape",
]

__version__ = "1.2.0"
