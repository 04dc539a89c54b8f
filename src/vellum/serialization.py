"""Render tree wire format — JSON ⇄ typed nodes.

The upstream parser sends the render tree as JSON: an ordered list whose
elements are either strings or objects with a ``t`` discriminant, an
optional ``c`` children list and kind-specific fields::

    [{"t": "h", "level": 1, "c": ["Title"]},
     {"t": "p", "c": ["Hello ", {"t": "em", "c": ["world"]}]}]

Decoding never fails on a single element. Unknown tags and known tags
with malformed fields become ``UnknownElem`` so the interpreter can log
and skip them. Only a payload whose root is not a list is rejected.

Example:
    from vellum.serialization import from_json, to_json

    tree = from_json('[{"t": "p", "c": ["hi"]}]')
    assert to_json(tree) == '[{"c":["hi"],"t":"p"}]'

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

import json
from collections.abc import Sequence
from dataclasses import fields
from typing import Any

from vellum.errors import TreeFormatError
from vellum.nodes import (
    NODE_TYPES,
    Checkbox,
    Code,
    Emoji,
    FootnoteDef,
    FootnoteRef,
    Heading,
    Image,
    Link,
    MathExpr,
    OrderedList,
    RawHtml,
    RenderTreeElem,
    Table,
    UnknownElem,
)
from vellum.utils.logger import get_logger

logger = get_logger(__name__)

_ALIGNS = frozenset({"left", "center", "right"})


class _Malformed(Exception):
    """Internal signal for a known tag with invalid fields."""


def _require(obj: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = obj.get(key)
    # bool is an int subclass; an id or level of True is malformed
    if not isinstance(value, kind) or (isinstance(value, bool) and bool not in _as_tuple(kind)):
        raise _Malformed(f"field {key!r} must be {_type_names(kind)}, got {value!r}")
    return value


def _optional(obj: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if obj.get(key) is None:
        return None
    return _require(obj, key, kind)


def _as_tuple(kind: type | tuple[type, ...]) -> tuple[type, ...]:
    return kind if isinstance(kind, tuple) else (kind,)


def _type_names(kind: type | tuple[type, ...]) -> str:
    return " or ".join(k.__name__ for k in _as_tuple(kind))


def _children(obj: dict[str, Any]) -> tuple[RenderTreeElem, ...]:
    raw = obj.get("c", [])
    if not isinstance(raw, list):
        raise _Malformed(f"children 'c' must be a list, got {type(raw).__name__}")
    return tuple(from_dict(child) for child in raw)


def _fields_for(tag: str, obj: dict[str, Any]) -> dict[str, Any]:
    """Decode the kind-specific fields of a known tag."""
    match tag:
        case Heading.TAG:
            level = _require(obj, "level", int)
            if not 1 <= level <= 6:
                raise _Malformed(f"heading level out of range: {level}")
            return {"level": level, "id": _optional(obj, "id", str) or None}
        case Link.TAG:
            return {
                "href": _require(obj, "href", str),
                "title": _optional(obj, "title", str),
                "auto": bool(obj.get("auto", False)),
            }
        case Image.TAG:
            return {"src": _require(obj, "src", str), "title": _optional(obj, "title", str)}
        case Code.TAG:
            return {"lang": _optional(obj, "lang", str) or None}
        case OrderedList.TAG:
            return {"start": _optional(obj, "start", int)}
        case Table.TAG:
            align = obj.get("align", [])
            if not isinstance(align, list) or any(
                a is not None and a not in _ALIGNS for a in align
            ):
                raise _Malformed(f"invalid table alignments: {align!r}")
            return {"align": tuple(align)}
        case FootnoteRef.TAG:
            return {"id": _require(obj, "id", (int, str))}
        case FootnoteDef.TAG:
            return {"id": _require(obj, "id", (int, str)), "name": _optional(obj, "name", str)}
        case MathExpr.TAG:
            return {"expr": _require(obj, "expr", str), "inline": bool(obj.get("inline", True))}
        case Checkbox.TAG:
            return {"checked": _require(obj, "checked", bool)}
        case Emoji.TAG:
            return {"name": _require(obj, "name", str)}
        case RawHtml.TAG:
            return {"raw": _require(obj, "raw", str)}
        case _:
            return {}


def from_dict(data: Any) -> RenderTreeElem:
    """Decode one wire element into a typed render tree element.

    Args:
        data: A string or a ``{"t": ..., "c": [...]}`` object.

    Returns:
        A string, a typed node, or ``UnknownElem`` for anything that cannot
        be decoded as a known kind.

    """
    if isinstance(data, str):
        return data
    if not isinstance(data, dict):
        logger.warning("Render tree element is neither text nor object: %r", data)
        return UnknownElem(tag="", raw={"value": data})

    tag = data.get("t")
    cls = NODE_TYPES.get(tag) if isinstance(tag, str) else None

    try:
        children = _children(data)
    except _Malformed as e:
        logger.warning("Malformed render tree element %r: %s", tag, e)
        return UnknownElem(tag=str(tag or ""), raw=data)

    if cls is None:
        return UnknownElem(tag=str(tag or ""), raw=data, children=children)

    try:
        kwargs = _fields_for(tag, data)
    except _Malformed as e:
        logger.warning("Malformed render tree element %r: %s", tag, e)
        return UnknownElem(tag=tag, raw=data, children=children)

    if "children" in {f.name for f in fields(cls)}:
        kwargs["children"] = children
    return cls(**kwargs)


def from_list(data: Any) -> list[RenderTreeElem]:
    """Decode a whole wire tree.

    Raises:
        TreeFormatError: If the root is not a list.

    """
    if not isinstance(data, list):
        raise TreeFormatError(
            f"render tree root must be a list, got {type(data).__name__}", payload=data
        )
    return [from_dict(elem) for elem in data]


def from_json(json_str: str | bytes) -> list[RenderTreeElem]:
    """Decode a render tree from a JSON string.

    Raises:
        TreeFormatError: If the text is not JSON or its root is not a list.

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise TreeFormatError(f"render tree is not valid JSON: {e}") from e
    return from_list(data)


def to_dict(elem: RenderTreeElem) -> Any:
    """Encode a typed element back into its wire shape.

    Optional fields left at ``None`` are omitted, like the parser does.
    ``UnknownElem`` is written back as the raw object it was decoded from.

    """
    if isinstance(elem, str):
        return elem
    if isinstance(elem, UnknownElem):
        return elem.raw

    result: dict[str, Any] = {"t": elem.TAG}
    for f in fields(elem):
        value = getattr(elem, f.name)
        if f.name == "children":
            result["c"] = [to_dict(child) for child in value]
        elif f.name == "align":
            result["align"] = list(value)
        elif value is not None:
            result[f.name] = value
    return result


def to_json(tree: Sequence[RenderTreeElem], *, indent: int | None = None) -> str:
    """Encode a render tree to deterministic JSON (sorted keys)."""
    separators = (",", ":") if indent is None else None
    return json.dumps(
        [to_dict(elem) for elem in tree],
        sort_keys=True,
        indent=indent,
        separators=separators,
        ensure_ascii=False,
    )
