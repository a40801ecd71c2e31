import pytest

from flt import (
    DCLine,
    Document,
    FormatError,
    LineType,
    TextLine,
    TypedLine,
    VocabularyError,
)
from flt.constants import DEFAULT_GENERATOR

SAMPLE = "\n".join(
    [
        "# sample document",
        "0003 0 text/vnd.ficlab.flt",
        "0003 1 1",
        "0003 2 1",
        "0003 4 https://example.com/tool",
        "0003 3 title A Tale",
        "0002 1",
        "0001 Hello ",
        "0021 world!",
        "0002 2",
        "0011 Second paragraph.",
    ]
)


def make_document() -> Document:
    return Document(SAMPLE)


def test_header_metadata_is_extracted() -> None:
    document = make_document()

    assert document.version == 1
    assert document.generator == "https://example.com/tool"
    assert document.features.dcmeta is True
    assert len(document.lines) == 6
    assert isinstance(document.lines[0], DCLine)
    assert document.text == "Hello world!Second paragraph."


def test_empty_document_defaults() -> None:
    document = Document()

    assert document.lines == []
    assert document.version == 1
    assert document.generator == DEFAULT_GENERATOR
    assert document.features.dcmeta is True


def test_document_from_lines() -> None:
    document = Document(lines=[TextLine(text="ab"), TextLine(text="cd")])

    assert document.text == "abcd"
    assert len(document.text_lines) == 2


def test_wrong_doctype_is_rejected() -> None:
    with pytest.raises(FormatError):
        Document("0003 0 text/plain\n0001 hi")


def test_unsupported_version_still_loads() -> None:
    document = Document("0003 1 2\n0001 hi")

    assert document.version == 2
    assert document.text == "hi"


def test_dc_line_without_dcmeta_fails_to_parse() -> None:
    with pytest.raises(FormatError):
        Document("0003 2 0\n0003 3 title X")


def test_dc_operations_require_dcmeta() -> None:
    document = Document()
    document.features.dcmeta = False

    with pytest.raises(FormatError):
        document.add_dc("title", "X")
    with pytest.raises(FormatError):
        document.get_dc("title")


def test_add_dc_rejects_unknown_term() -> None:
    with pytest.raises(VocabularyError):
        Document().add_dc("colour", "red")


def test_get_dc_in_document_order() -> None:
    document = Document()
    document.add_dc("creator", "First")
    document.add_dc("title", "Book")
    document.add_dc("creator", "Second")

    assert document.get_dc("creator") == ["First", "Second"]
    assert document.get_dc("subject") == []


def test_set_dc_replaces_and_removes() -> None:
    document = make_document()

    document.set_dc("title", ["One", "Two"])
    assert document.get_dc("title") == ["One", "Two"]

    document.set_dc("title", "Only")
    assert document.get_dc("title") == ["Only"]

    document.set_dc("title")
    assert document.get_dc("title") == []
    assert not any(isinstance(line, DCLine) for line in document.lines)


def test_dc_lines_render_sorted_by_term() -> None:
    document = Document()
    for term in ["title", "creator", "abstract"]:
        document.add_dc(term, f"{term} value")

    rendered = str(document).split("\n")

    assert rendered[4:] == [
        "0003 3 abstract abstract value",
        "0003 3 creator creator value",
        "0003 3 title title value",
    ]


def test_render_stamps_default_generator() -> None:
    rendered = make_document().to_source()

    assert f"0003 4 {DEFAULT_GENERATOR}" in rendered
    assert "example.com/tool" not in rendered


def test_render_round_trip_keeps_body() -> None:
    document = make_document()

    reparsed = Document(str(document))

    assert reparsed.lines == document.lines
    assert reparsed.features == document.features
    assert reparsed.version == document.version


def test_touch_increments_revision() -> None:
    document = Document()

    assert document.revision == 0
    assert document.touch() == 1
    document.add_dc("title", "T")
    assert document.revision == 2


def test_direct_line_edits_render() -> None:
    document = Document()
    document.lines.append(TypedLine(line_type=LineType.SECTION))
    document.lines.append(TextLine(text="new"))
    document.touch()

    assert str(document).split("\n")[4:] == ["0002 1", "0001 new"]


def test_carriage_returns_next_to_line_breaks_do_not_survive() -> None:
    document = Document(
        lines=[TextLine(text="a\rb"), TextLine(text="c\r"), TextLine(text="d")]
    )

    reparsed = Document(document.to_source())

    assert [line.text for line in reparsed.text_lines] == ["a\rb", "c", "d"]
