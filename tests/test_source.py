from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from xmlparse.sink import OutputError
from xmlparse.source import (
    BytesSource,
    FileSource,
    InputError,
    PrefixScope,
    split_clark,
)


class _Recorder:
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def start_element(self, name: str, attributes: Sequence[tuple[str, str]]) -> None:
        self.events.append(("start", name, list(attributes)))

    def end_element(self, name: str) -> None:
        self.events.append(("end", name))

    def characters(self, text: str) -> None:
        self.events.append(("text", text))

    def processing_instruction(self, target: str, data: str) -> None:
        self.events.append(("pi", target, data))

    def comment(self, text: str) -> None:
        self.events.append(("comment", text))

    def end_document(self) -> None:
        self.events.append(("eod",))


def _events(xml: str, **kwargs) -> list[tuple]:
    rec = _Recorder()
    BytesSource(xml, **kwargs).run(rec)
    return rec.events


def test_events_arrive_in_document_order() -> None:
    events = _events('<a x="1" y="2"><b>hi</b><!--c--><?t d?></a>')
    assert events == [
        ("start", "a", [("x", "1"), ("y", "2")]),
        ("start", "b", []),
        ("text", "hi"),
        ("end", "b"),
        ("comment", "c"),
        ("pi", "t", "d"),
        ("end", "a"),
        ("eod",),
    ]


def test_text_split_by_entities_is_coalesced() -> None:
    events = _events("<a>x &amp; y &lt; z</a>")
    assert ("text", "x & y < z") in events
    assert [e for e in events if e[0] == "text"] == [("text", "x & y < z")]


def test_text_is_coalesced_across_small_chunks() -> None:
    events = _events("<a>abcdefghij</a>", chunk_size=3)
    assert [e for e in events if e[0] == "text"] == [("text", "abcdefghij")]


def test_cdata_is_delivered_as_text() -> None:
    events = _events("<a><![CDATA[<b> & c]]></a>")
    assert ("text", "<b> & c") in events


def test_namespaced_names_keep_their_prefix() -> None:
    events = _events('<r xmlns="urn:r" xmlns:p="urn:p"><p:c p:k="1" k="2"/><c/></r>')
    assert events == [
        ("start", "r", [("xmlns", "urn:r"), ("xmlns:p", "urn:p")]),
        ("start", "p:c", [("p:k", "1"), ("k", "2")]),
        ("end", "p:c"),
        ("start", "c", []),
        ("end", "c"),
        ("end", "r"),
        ("eod",),
    ]


def test_redeclared_prefix_goes_out_of_scope() -> None:
    events = _events(
        '<a xmlns:p="u1"><p:b xmlns:p="u2"><p:c/></p:b><p:d/></a>'
    )
    assert [e for e in events if e[0] == "start"] == [
        ("start", "a", [("xmlns:p", "u1")]),
        ("start", "p:b", [("xmlns:p", "u2")]),
        ("start", "p:c", []),
        ("start", "p:d", []),
    ]


def test_xml_namespace_attributes_use_xml_prefix() -> None:
    events = _events('<a xml:lang="en" xml:space="preserve"/>')
    assert events[0] == ("start", "a", [("xml:lang", "en"), ("xml:space", "preserve")])


def test_pi_without_data_gets_empty_string() -> None:
    events = _events("<a><?marker?></a>")
    assert ("pi", "marker", "") in events


def test_syntax_error_is_input_error() -> None:
    with pytest.raises(InputError):
        _events("<a><b></a>")


def test_empty_document_is_input_error() -> None:
    with pytest.raises(InputError):
        _events("")


def test_missing_file_is_input_error(tmp_path: Path) -> None:
    with pytest.raises(InputError, match="cannot read input"):
        FileSource(tmp_path / "missing.xml").run(_Recorder())


def test_file_source_reads_in_chunks(tmp_path: Path) -> None:
    path = tmp_path / "doc.xml"
    path.write_text("<a><b>text</b></a>", encoding="utf-8")
    rec = _Recorder()
    warnings = FileSource(path, chunk_size=4).run(rec)
    assert warnings == []
    assert ("text", "text") in rec.events
    assert rec.events[-1] == ("eod",)


def test_handler_errors_propagate_unchanged() -> None:
    class _Failing(_Recorder):
        def start_element(self, name, attributes) -> None:
            raise OutputError("write failed")

    with pytest.raises(OutputError, match="write failed"):
        BytesSource("<a/>").run(_Failing())


def test_split_clark() -> None:
    assert split_clark("{urn:x}tag") == ("urn:x", "tag")
    assert split_clark("tag") == (None, "tag")


def test_prefix_scope_qualifies_innermost_binding() -> None:
    scope = PrefixScope()
    scope.push({None: "urn:d", "p": "urn:p"})
    scope.push({"q": "urn:p"})
    assert scope.qualify("{urn:p}x") == "q:x"
    assert scope.qualify("{urn:d}x") == "x"
    assert scope.qualify("{urn:d}x", attribute=True) == "x"
    scope.pop()
    assert scope.qualify("{urn:p}x") == "p:x"
