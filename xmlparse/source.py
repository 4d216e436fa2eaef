from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Protocol

from lxml import etree

DEFAULT_CHUNK_SIZE = 64 * 1024


class InputError(ValueError):
    """The input could not be read or is not well-formed XML."""


class EventHandler(Protocol):
    def start_element(
        self, name: str, attributes: Sequence[tuple[str, str]]
    ) -> None: ...

    def end_element(self, name: str) -> None: ...

    def characters(self, text: str) -> None: ...

    def processing_instruction(self, target: str, data: str) -> None: ...

    def comment(self, text: str) -> None: ...

    def end_document(self) -> None: ...


class EventSource(Protocol):
    """Drives an EventHandler synchronously over one document."""

    name: str

    def run(self, handler: EventHandler) -> list[str]: ...


XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def split_clark(name: str) -> tuple[str | None, str]:
    # lxml reports namespaced names as "{uri}local"
    if name.startswith("{"):
        uri, _, local = name[1:].partition("}")
        return uri, local
    return None, name


class PrefixScope:
    """Namespace declarations in effect for the open elements, innermost last."""

    def __init__(self) -> None:
        self._frames: list[dict[str | None, str]] = []

    def push(self, declarations: dict[str | None, str]) -> None:
        self._frames.append(dict(declarations))

    def pop(self) -> None:
        if self._frames:
            self._frames.pop()

    def _prefix_for(self, uri: str, *, allow_default: bool) -> str | None:
        for frame in reversed(self._frames):
            for prefix, bound in frame.items():
                if bound != uri:
                    continue
                if prefix is None and not allow_default:
                    continue
                return prefix or ""
        return None

    def qualify(self, name: str, *, attribute: bool = False) -> str:
        """Turn ``{uri}local`` back into ``prefix:local`` as written."""
        uri, local = split_clark(name)
        if uri is None:
            return local
        if uri == XML_NAMESPACE:
            return f"xml:{local}"
        prefix = self._prefix_for(uri, allow_default=not attribute)
        return f"{prefix}:{local}" if prefix else local


def declaration_attributes(
    declarations: dict[str | None, str],
) -> list[tuple[str, str]]:
    return [
        ("xmlns" if prefix is None else f"xmlns:{prefix}", uri)
        for prefix, uri in declarations.items()
    ]


class _Target:
    """lxml parser target that forwards callbacks to an EventHandler.

    lxml may split a single text node across several ``data`` calls, so
    text is collected and handed over as one event before anything else.
    Namespace declarations come in through ``nsmap`` and are reported as
    ``xmlns`` attributes ahead of the element's own attributes.
    """

    def __init__(self, handler: EventHandler) -> None:
        self._handler = handler
        self._text: list[str] = []
        self._scope = PrefixScope()

    def _flush_text(self) -> None:
        if not self._text:
            return
        text = "".join(self._text)
        self._text.clear()
        self._handler.characters(text)

    def start(
        self, tag: str, attrib: dict[str, str], nsmap: dict[str | None, str]
    ) -> None:
        self._flush_text()
        self._scope.push(nsmap or {})
        attributes = declaration_attributes(nsmap or {})
        attributes.extend(
            (self._scope.qualify(key, attribute=True), value)
            for key, value in attrib.items()
        )
        self._handler.start_element(self._scope.qualify(tag), attributes)

    def end(self, tag: str) -> None:
        self._flush_text()
        name = self._scope.qualify(tag)
        self._scope.pop()
        self._handler.end_element(name)

    def data(self, data: str) -> None:
        self._text.append(data)

    def comment(self, text: str | None) -> None:
        self._flush_text()
        self._handler.comment(text or "")

    def pi(self, target: str | None, data: str | None = None) -> None:
        self._flush_text()
        self._handler.processing_instruction(target or "", data or "")

    def close(self) -> None:
        self._flush_text()
        self._handler.end_document()


class LxmlSource:
    """Feeds a document to lxml in chunks: one forward pass, no tree built."""

    def __init__(self, name: str, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.name = name
        self.chunk_size = max(1, chunk_size)

    def _chunks(self) -> Iterator[bytes]:
        raise NotImplementedError

    def _next_chunk(self, chunks: Iterator[bytes]) -> bytes | None:
        try:
            return next(chunks, None)
        except OSError as e:
            raise InputError(f"cannot read input: {e.strerror or e}") from e

    def run(self, handler: EventHandler) -> list[str]:
        """Parse the whole document, returning the parser's warnings."""
        parser = etree.XMLParser(target=_Target(handler))
        chunks = self._chunks()
        try:
            while True:
                chunk = self._next_chunk(chunks)
                if chunk is None:
                    break
                parser.feed(chunk)
            parser.close()
        except etree.XMLSyntaxError as e:
            raise InputError(str(e)) from e
        return [
            f"line {entry.line}: {entry.message}"
            for entry in parser.error_log
            if entry.level == etree.ErrorLevels.WARNING
        ]


class FileSource(LxmlSource):
    def __init__(self, path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        super().__init__(str(path), chunk_size=chunk_size)
        self.path = Path(path)

    def _chunks(self) -> Iterator[bytes]:
        with self.path.open("rb") as fh:
            while True:
                chunk = fh.read(self.chunk_size)
                if not chunk:
                    return
                yield chunk


class BytesSource(LxmlSource):
    def __init__(
        self,
        data: bytes | str,
        name: str = "<string>",
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__(name, chunk_size=chunk_size)
        self.data = data.encode("utf-8") if isinstance(data, str) else data

    def _chunks(self) -> Iterator[bytes]:
        for start in range(0, len(self.data), self.chunk_size):
            yield self.data[start : start + self.chunk_size]
