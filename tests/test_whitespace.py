from __future__ import annotations

import pytest

from xmlparse.config import Config
from xmlparse.whitespace import active_glyphs, format_text, is_blank, mappings_line

MAPPED = Config(map_whitespace=True)
COMPRESSED = Config(compress_whitespace=True)
BOTH = Config(map_whitespace=True, compress_whitespace=True)


@pytest.mark.parametrize(
    "text",
    ["", "plain", "  lead and trail  ", "a\tb\nc", "\r\n mixed   ws", "ünï·»↵"],
)
def test_passthrough_without_mapping_or_compression(text: str) -> None:
    assert format_text(text, Config()) == text


def test_mapping_replaces_each_whitespace_character() -> None:
    assert format_text("a b\tc\nd", MAPPED) == "a·b»c↵d"


def test_mapping_leaves_other_whitespace_alone() -> None:
    assert format_text("a\rb c", MAPPED) == "a\rb c"


def test_mapping_uses_configured_glyphs() -> None:
    cfg = Config(map_whitespace=True, space_map="_", tab_map=">", newline_map="$")
    assert format_text(" \t\n", cfg) == "_>$"


def test_mapping_does_not_compress_runs() -> None:
    assert format_text("        ", MAPPED) == "·" * 8


def test_compression_of_exactly_one_level_gives_one_tab_glyph() -> None:
    assert format_text("    ", BOTH) == "»"


def test_compression_short_run_before_letter_is_kept() -> None:
    assert format_text("   x", BOTH) == "···x"


def test_compression_two_levels_give_two_tab_glyphs() -> None:
    assert format_text(" " * 8, BOTH) == "»»"


def test_compression_remainder_is_flushed_at_end() -> None:
    assert format_text("x      ", BOTH) == "x»··"


def test_compression_run_is_broken_by_other_characters() -> None:
    assert format_text("  a  b    c", BOTH) == "··a··b»c"


def test_compression_maps_tabs_and_newlines_without_compressing_them() -> None:
    assert format_text("\t\t\n\n", BOTH) == "»»↵↵"


def test_compression_without_mapping_uses_literal_characters() -> None:
    assert format_text("        x  \n\t", COMPRESSED) == "\t\tx  \n\t"


def test_compression_level_is_respected() -> None:
    cfg = Config(map_whitespace=True, compress_whitespace=True, compress_level=2)
    assert format_text("     ", cfg) == "»»·"


def test_compression_level_one_turns_every_space_into_tab() -> None:
    cfg = Config(compress_whitespace=True, compress_level=1)
    assert format_text("a b  c", cfg) == "a\tb\t\tc"


def test_active_glyphs_follow_mapping_switch() -> None:
    assert active_glyphs(Config()) == (" ", "\t", "\n")
    assert active_glyphs(MAPPED) == ("·", "»", "↵")


def test_mappings_line_orders_space_tab_newline() -> None:
    assert mappings_line(Config()) == "·»↵"
    assert mappings_line(Config(space_map="s", tab_map="t", newline_map="n")) == "stn"


def test_is_blank() -> None:
    assert is_blank("")
    assert is_blank("   \n  \t")
    assert is_blank("　 ")
    assert not is_blank("  x ")
