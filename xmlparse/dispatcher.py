from __future__ import annotations

from collections.abc import Sequence

from .config import Config
from .formats import (
    ATTRIBUTE_ITEM,
    ATTRIBUTE_LINE,
    ATTRIBUTE_SEPARATOR,
    COMMENT_LINE,
    PI_LINE,
    TEXT_LINE,
)
from .sink import OutputSink
from .tags import TagStack
from .whitespace import format_text, is_blank


class EventDispatcher:
    """Turns parse events into path lines.

    Every open element's bare path is written at most once: when its first
    child starts, or when it closes without anything else having printed
    it. Attribute and text lines count as printing the path.
    """

    def __init__(
        self,
        cfg: Config,
        sink: OutputSink,
        stack: TagStack | None = None,
    ) -> None:
        self.cfg = cfg
        self.sink = sink
        self.stack = stack if stack is not None else TagStack()

    def _print_last_tag(self) -> None:
        frame = self.stack.peek_last()
        if frame is None or frame.printed:
            return
        self.sink.write_line(self.stack.display())
        frame.printed = True

    def start_element(self, name: str, attributes: Sequence[tuple[str, str]]) -> None:
        self._print_last_tag()
        frame = self.stack.push(name)
        if not attributes:
            return

        items = ATTRIBUTE_SEPARATOR.join(
            ATTRIBUTE_ITEM.format(key=key, value=format_text(value, self.cfg))
            for key, value in attributes
        )
        self.sink.write_line(
            ATTRIBUTE_LINE.format(path=self.stack.display(), attributes=items)
        )
        frame.printed = True

    def end_element(self, name: str) -> None:
        frame = self.stack.peek_last()
        if frame is None or frame.name != name:
            # Stray or mismatched end tag: leave the stack alone.
            return
        self._print_last_tag()
        self.stack.pop()

    def characters(self, text: str) -> None:
        if not self.cfg.keep_all_whitespace and is_blank(text):
            return
        self.sink.write_line(
            TEXT_LINE.format(
                path=self.stack.display(),
                text=format_text(text, self.cfg),
            )
        )
        self.stack.mark_printed()

    def processing_instruction(self, target: str, data: str) -> None:
        self.sink.write_line(
            PI_LINE.format(
                path=self.stack.display(),
                target=target,
                data=format_text(data, self.cfg),
            )
        )

    def comment(self, text: str) -> None:
        self.sink.write_line(
            COMMENT_LINE.format(
                path=self.stack.display(),
                text=format_text(text, self.cfg),
            )
        )

    def end_document(self) -> None:
        # Frames left open by a truncated event stream are dropped.
        self.stack = TagStack()
