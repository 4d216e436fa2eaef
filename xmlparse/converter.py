from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .config import Config
from .dispatcher import EventDispatcher
from .sink import OutputSink
from .source import BytesSource, EventSource, FileSource


@dataclass(frozen=True)
class ConversionResult:
    name: str
    lines: int
    warnings: list[str]


def convert_source(
    source: EventSource, cfg: Config, stream: TextIO
) -> ConversionResult:
    """Run one forward pass over ``source``, writing path lines to ``stream``.

    Lines produced before an input or output error are still flushed; the
    error is then re-raised to the caller.
    """
    with OutputSink(stream) as sink:
        dispatcher = EventDispatcher(cfg, sink)
        warnings = source.run(dispatcher)
    return ConversionResult(
        name=source.name, lines=sink.lines_written, warnings=warnings
    )


def convert_file(path: Path, cfg: Config, stream: TextIO) -> ConversionResult:
    return convert_source(FileSource(path), cfg, stream)


def convert_string(xml: bytes | str, cfg: Config | None = None) -> str:
    out = io.StringIO()
    convert_source(BytesSource(xml), cfg or Config(), out)
    return out.getvalue()
