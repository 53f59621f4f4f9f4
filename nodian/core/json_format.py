# nodian/core/json_format.py
import json
from typing import Any, List, Optional

from loguru import logger

from .errors import ParseError

DEFAULT_INDENT = 2


class _Number(str):
    """A numeric literal exactly as written in the source."""


class _Object(list):
    """Key/value pairs of an object, in source order (duplicates included)."""


def _reject_constant(name: str):
    # NaN / Infinity are not JSON
    raise ParseError(f"Invalid JSON: unexpected literal {name}")


def _wrap(open_: str, close: str, items: List[str], indent: Optional[int], level: int) -> str:
    if not items:
        return open_ + close
    if indent is None:
        return open_ + ",".join(items) + close
    inner = "\n" + " " * (indent * (level + 1))
    return open_ + inner + ("," + inner).join(items) + "\n" + " " * (indent * level) + close


def _render(value: Any, indent: Optional[int], level: int) -> str:
    if isinstance(value, _Number):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    key_sep = ":" if indent is None else ": "
    if isinstance(value, _Object):
        members = [f"{json.dumps(key, ensure_ascii=False)}{key_sep}{_render(item, indent, level + 1)}"
                   for key, item in value]
        return _wrap("{", "}", members, indent, level)
    return _wrap("[", "]", [_render(item, indent, level + 1) for item in value], indent, level)


def format_json(text: str, compact: bool = False, indent: int = DEFAULT_INDENT) -> str:
    """
    Re-serializes JSON text, either pretty-printed or compacted.

    Only whitespace changes: key order, duplicate keys, number literals and
    non-ASCII characters come out as they went in. Raises ParseError with
    the position of the first syntax error for invalid input.
    """
    try:
        value = json.loads(text, parse_int=_Number, parse_float=_Number,
                           parse_constant=_reject_constant, object_pairs_hook=_Object)
    except json.JSONDecodeError as e:
        logger.debug(f"JSON parse failed at line {e.lineno}, column {e.colno}: {e.msg}")
        raise ParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e

    return _render(value, None if compact else indent, 0)
