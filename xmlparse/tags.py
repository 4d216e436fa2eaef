from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class TagFrame:
    """One open element; ``printed`` flips once its path line has been written."""

    name: str
    printed: bool = False


class TagStack:
    """Ancestor chain of the currently open elements, root first."""

    __slots__ = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[TagFrame] = []

    def push(self, name: str) -> TagFrame:
        frame = TagFrame(name)
        self._frames.append(frame)
        return frame

    def pop(self) -> TagFrame:
        if not self._frames:
            raise IndexError("pop from an empty tag stack")
        return self._frames.pop()

    def peek_last(self) -> TagFrame | None:
        return self._frames[-1] if self._frames else None

    def mark_printed(self) -> None:
        frame = self.peek_last()
        if frame is not None:
            frame.printed = True

    def display(self) -> str:
        return "".join(f"/{frame.name}" for frame in self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[TagFrame]:
        return iter(self._frames)

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return f"TagStack({self.display()!r})"
