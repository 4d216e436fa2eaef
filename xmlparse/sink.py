from __future__ import annotations

from types import TracebackType
from typing import TextIO

DEFAULT_BUFFER_SIZE = 8192


class OutputError(OSError):
    """Writing to the output stream failed; the current file is abandoned."""


class OutputSink:
    """Append-only line writer that batches writes to a text stream."""

    def __init__(self, stream: TextIO, *, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self._stream = stream
        self._buffer_size = max(0, buffer_size)
        self._pending: list[str] = []
        self._pending_chars = 0
        self.lines_written = 0

    def write_line(self, line: str) -> None:
        self._pending.append(line)
        self._pending.append("\n")
        self._pending_chars += len(line) + 1
        self.lines_written += 1
        if self._pending_chars > self._buffer_size:
            self._drain()

    def _drain(self) -> None:
        if not self._pending:
            return
        chunk = "".join(self._pending)
        self._pending.clear()
        self._pending_chars = 0
        try:
            self._stream.write(chunk)
        except (OSError, ValueError) as e:
            raise OutputError(f"write failed: {e}") from e

    def flush(self) -> None:
        self._drain()
        try:
            self._stream.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"flush failed: {e}") from e

    def __enter__(self) -> OutputSink:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.flush()
