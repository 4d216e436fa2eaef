from __future__ import annotations

from .config import Config

SPACE = " "
TAB = "\t"
NEWLINE = "\n"


def _glyph_table(cfg: Config) -> dict[int, str]:
    return str.maketrans(
        {SPACE: cfg.space_map, TAB: cfg.tab_map, NEWLINE: cfg.newline_map}
    )


def active_glyphs(cfg: Config) -> tuple[str, str, str]:
    """Return the (space, tab, newline) characters currently in effect."""
    if cfg.map_whitespace:
        return cfg.space_map, cfg.tab_map, cfg.newline_map
    return SPACE, TAB, NEWLINE


def mappings_line(cfg: Config) -> str:
    # Order matches `sed "y/$MAPS/ \t\n/"`.
    return f"{cfg.space_map}{cfg.tab_map}{cfg.newline_map}"


def is_blank(text: str) -> bool:
    return not text.strip()


def format_text(text: str, cfg: Config) -> str:
    """Make whitespace in ``text`` display-safe according to ``cfg``.

    - no mapping, no compression: ``text`` is returned unchanged
    - mapping only: space/tab/newline become their glyphs
    - compression: every ``compress_level`` consecutive spaces collapse into
      one active tab; shorter runs are emitted as active spaces. Tabs and
      newlines are never run-length compressed, only mapped.
    """
    if not cfg.map_whitespace and not cfg.compress_whitespace:
        return text
    if not cfg.compress_whitespace:
        return text.translate(_glyph_table(cfg))

    space, tab, newline = active_glyphs(cfg)
    substitute = {TAB: tab, NEWLINE: newline} if cfg.map_whitespace else {}
    level = cfg.compress_level
    out: list[str] = []
    run = 0
    for ch in text:
        if ch == SPACE:
            run += 1
            if run == level:
                out.append(tab)
                run = 0
            continue
        if run:
            # run < level here: it resets whenever it reaches the threshold
            out.append(space * run)
            run = 0
        out.append(substitute.get(ch, ch))
    if run:
        out.append(space * run)
    return "".join(out)
