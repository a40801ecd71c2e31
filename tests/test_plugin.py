import pytest

from flt import Document, Plugin, PluginError


class WordCount(Plugin):
    name = "wordcount"
    exports = ("word_count", "greeting")

    def __init__(self) -> None:
        self.setups = 0
        self.greeting_text = ""

    def setup(self, document: Document, greeting: str = "hi") -> None:
        self.setups += 1
        self.greeting_text = greeting

    def word_count(self, document: Document) -> int:
        return len(document.text.split())

    def greeting(self, document: Document, name: str) -> str:
        return f"{self.greeting_text} {name}"


class Broken(Plugin):
    name = "broken"
    exports = ("missing",)


def make_document() -> Document:
    return Document("0001 one two \n0001 three")


def test_attached_methods_receive_document() -> None:
    document = make_document()

    plugin = document.use(WordCount, "hello")

    assert document.call("word_count") == 3
    assert document.call("greeting", "reader") == "hello reader"
    assert plugin.setups == 1
    assert "word_count" in document.plugins
    assert document.plugins.names == ("greeting", "word_count")


def test_plugin_sees_later_edits() -> None:
    document = make_document()
    document.use(WordCount)

    document.add_dc("title", "ignored")
    document.text_lines[0].text = "just "

    assert document.call("word_count") == 2


def test_conflicting_plugin_is_rejected() -> None:
    document = make_document()
    document.use(WordCount)

    with pytest.raises(PluginError):
        document.use(WordCount)

    assert len(document.plugins.plugins) == 1


def test_replace_allows_reattaching() -> None:
    document = make_document()
    document.use(WordCount, "a")

    document.plugins.attach(WordCount, "b", replace=True)

    assert document.call("greeting", "x") == "b x"


def test_unknown_method() -> None:
    with pytest.raises(PluginError):
        make_document().call("nothing")


def test_missing_export() -> None:
    with pytest.raises(PluginError):
        make_document().use(Broken)
