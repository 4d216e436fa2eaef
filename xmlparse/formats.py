from __future__ import annotations

ATTRIBUTE_LINE = "{path}@[{attributes}]"
ATTRIBUTE_ITEM = '{key}="{value}"'
ATTRIBUTE_SEPARATOR = ","
TEXT_LINE = '{path}="{text}"'
PI_LINE = "{path}/{target}?[{data}]"
COMMENT_LINE = "{path}/![{text}]"
