import pytest

from flt import (
    Align,
    Bitfield,
    DCLine,
    Destination,
    FLTNotImplementedError,
    LineKind,
    LineType,
    MetaLine,
    MetaType,
    TextLine,
    TypedLine,
    VocabularyError,
)
from flt.lines import is_text, is_typed


def test_text_line_style_flags() -> None:
    line = TextLine(3, Bitfield(value="0031"), "styled")

    assert line.type == LineKind.TEXT
    assert line.italic is True
    assert line.bold is True
    assert line.underline is False
    assert line.line_no == 3
    assert line.length == 6


def test_text_line_renders_padded_flags() -> None:
    line = TextLine(text="plain")
    line.bold = True

    assert str(line) == "0021 plain"


def test_text_length_follows_text() -> None:
    line = TextLine(text="abc")

    line.text = "abcdef"

    assert line.length == 6


def test_align_only_on_sections_and_paragraphs() -> None:
    paragraph = TypedLine(line_type=LineType.PARAGRAPH)
    hint = TypedLine(line_type=LineType.HINT, content="tip")

    paragraph.align = Align.CENTER

    assert paragraph.align is Align.CENTER
    assert str(paragraph) == "0022 2"
    assert not hasattr(hint, "align")


def test_section_visual_break_bit() -> None:
    section = TypedLine(line_type=LineType.SECTION)

    section.visual_break = True

    assert section.flags.value == 0x42
    assert not hasattr(TypedLine(line_type=LineType.PARAGRAPH), "visual_break")


def test_destination_fields() -> None:
    line = TypedLine(line_type=LineType.DESTINATION)

    line.destination = Destination.CELL
    line.header = True

    assert line.destination is Destination.CELL
    assert line.header is True
    assert str(line) == "0122 9"


def test_typed_numeric_content_renders_as_hex() -> None:
    table = TypedLine(line_type=LineType.TABLE, content=31)

    assert str(table) == "0002 8 1f"


def test_meta_object_content_is_not_renderable() -> None:
    line = MetaLine(meta_type=MetaType.GENERATOR, content=object())

    with pytest.raises(FLTNotImplementedError):
        str(line)


def test_dc_line_validates_term() -> None:
    with pytest.raises(VocabularyError):
        DCLine(term="nonsense", value="x")

    line = DCLine(term="title", value="A Tale")
    assert str(line) == "0003 3 title A Tale"


def test_structural_equality_ignores_line_numbers() -> None:
    assert TextLine(1, text="same") == TextLine(9, text="same")
    assert TextLine(text="same") != TextLine(text="other")


def test_line_kind_predicates() -> None:
    text = TextLine(text="x")
    section = TypedLine(line_type=LineType.SECTION)
    meta = MetaLine(meta_type=MetaType.GENERATOR, content="gen")

    assert is_text(text) and not is_text(section)
    assert is_typed(section) and not is_typed(meta)
    assert is_typed(section, LineType.SECTION, LineType.PARAGRAPH)
    assert not is_typed(section, LineType.DESTINATION)
