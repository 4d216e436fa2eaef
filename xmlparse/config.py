from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # pyright: ignore[reportMissingImports]

_OWN_TABLE = ("xmlparse",)
_TOOL_TABLE = ("tool", "xmlparse")

# (file name, tables tried in order); pyproject.toml only honors [tool.xmlparse]
CONFIG_LOOKUP: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    (".xmlparse.toml", (_OWN_TABLE, _TOOL_TABLE)),
    ("xmlparse.toml", (_OWN_TABLE, _TOOL_TABLE)),
    ("pyproject.toml", (_TOOL_TABLE,)),
)

DEFAULT_SPACE_MAP = "·"
DEFAULT_TAB_MAP = "»"
DEFAULT_NEWLINE_MAP = "↵"
DEFAULT_COMPRESS_LEVEL = 4

_BOOL_KEYS: tuple[str, ...] = (
    "map_whitespace",
    "compress_whitespace",
    "keep_all_whitespace",
)
_GLYPH_KEYS: tuple[str, ...] = ("space_map", "tab_map", "newline_map")


@dataclass(frozen=True)
class Config:
    # Replace literal space/tab/newline with the visible glyphs below.
    map_whitespace: bool = False
    # Collapse every `compress_level` consecutive spaces into one tab glyph.
    compress_whitespace: bool = False
    space_map: str = DEFAULT_SPACE_MAP
    tab_map: str = DEFAULT_TAB_MAP
    newline_map: str = DEFAULT_NEWLINE_MAP
    compress_level: int = DEFAULT_COMPRESS_LEVEL
    # Print text nodes that contain nothing but whitespace.
    keep_all_whitespace: bool = False

    def validate(self) -> Config:
        for key in _GLYPH_KEYS:
            value = getattr(self, key)
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError(f"{key} must be a single character, got {value!r}")
        if isinstance(self.compress_level, bool) or not isinstance(
            self.compress_level, int
        ):
            raise ValueError(
                f"compress_level must be an integer, got {self.compress_level!r}"
            )
        if self.compress_level < 1:
            raise ValueError(
                f"compress_level must be at least 1, got {self.compress_level}"
            )
        return self


def _table(data: Any, keys: tuple[str, ...]) -> dict[str, Any] | None:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data if isinstance(data, dict) else None


def _read_section(root: Path) -> dict[str, Any]:
    # The first config file found wins, even if it has no xmlparse table.
    root = root.resolve()
    for filename, tables in CONFIG_LOOKUP:
        path = root / filename
        if not path.exists():
            continue
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        for keys in tables:
            section = _table(data, keys)
            if section is not None:
                return section
        return {}
    return {}


def _parse_level(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        level = int(value)
    except (TypeError, ValueError):
        return None
    return level if level >= 1 else None


def load_config(root: Path) -> Config:
    section = _read_section(root)
    values: dict[str, Any] = {}

    for key in _BOOL_KEYS:
        if key in section:
            values[key] = bool(section[key])

    for key in _GLYPH_KEYS:
        glyph = section.get(key)
        if isinstance(glyph, str) and len(glyph) == 1:
            values[key] = glyph

    if "compress_level" in section:
        level = _parse_level(section["compress_level"])
        if level is not None:
            values["compress_level"] = level

    return Config(**values)
