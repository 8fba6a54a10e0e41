"""Rendering of free-form report insights.

Insight values arrive with arbitrary nesting. They are first converted into
a small recursive variant (scalar, sequence, mapping) with at most
``MAX_DEPTH`` levels of nesting below the top value. Anything deeper is
kept as an opaque scalar and rendered as compact JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Union

from .presentation import format_duration, format_number, prettify_key

MAX_DEPTH = 2

PERCENTAGE_MARKERS = ("rate", "percentage", "compliance")
TIME_MARKERS = ("time", "duration")


@dataclass(frozen=True)
class ScalarValue:
    value: Any


@dataclass(frozen=True)
class SequenceValue:
    items: Tuple["InsightValue", ...]


@dataclass(frozen=True)
class MappingValue:
    entries: Tuple[Tuple[str, "InsightValue"], ...]


InsightValue = Union[ScalarValue, SequenceValue, MappingValue]


def to_insight_value(value: Any, depth: int = 0) -> InsightValue:
    if depth <= MAX_DEPTH:
        if isinstance(value, dict):
            return MappingValue(tuple((str(k), to_insight_value(v, depth + 1)) for k, v in value.items()))
        if isinstance(value, (list, tuple)):
            return SequenceValue(tuple(to_insight_value(v, depth + 1) for v in value))
    return ScalarValue(value)


def insight_kind(key: str) -> str:
    lowered = (key or "").lower()
    if any(marker in lowered for marker in PERCENTAGE_MARKERS):
        return "percentage"
    if any(marker in lowered for marker in TIME_MARKERS):
        return "time"
    return "plain"


def _scalar_text(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _plain(node: InsightValue) -> Any:
    if isinstance(node, ScalarValue):
        return node.value
    if isinstance(node, SequenceValue):
        return [_plain(i) for i in node.items]
    return {k: _plain(v) for k, v in node.entries}


def _text(node: InsightValue) -> str:
    if isinstance(node, ScalarValue):
        return _scalar_text(node.value)
    return _scalar_text(_plain(node))


def _pairs(entries: Iterable[Tuple[str, InsightValue]]) -> str:
    return ", ".join(f"{k}: {_text(v)}" for k, v in entries)


def _sequence_item(item: InsightValue) -> str:
    if isinstance(item, MappingValue) and len(item.entries) == 2:
        (label, _first), (_k2, data) = item.entries
        if isinstance(data, MappingValue) and data.entries:
            return f"{label}: {_pairs(data.entries)}"
        return f"{label}: {_text(data)}"
    return _text(item)


def _format_sequence(node: SequenceValue) -> str:
    if not node.items:
        return "No data"
    if all(isinstance(i, MappingValue) for i in node.items):
        return "; ".join(_sequence_item(i) for i in node.items)
    return ", ".join(_text(i) for i in node.items)


def _format_mapping(node: MappingValue) -> str:
    if not node.entries:
        return "No data"
    if len(node.entries) > 3:
        return f"{len(node.entries)} items"
    parts = []
    for k, v in node.entries:
        if isinstance(v, MappingValue) and v.entries:
            parts.append(f"{k}: {_pairs(v.entries)}")
        else:
            parts.append(f"{k}: {_text(v)}")
    return "; ".join(parts)


def _format_scalar(kind: str, value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        if kind == "percentage":
            return f"{float(value):.1f}%"
        if kind == "time":
            return format_duration(value)
        return format_number(value)
    if isinstance(value, str):
        return value
    return _scalar_text(value)


def format_insight(key: str, value: Any) -> str:
    node = to_insight_value(value)
    if isinstance(node, SequenceValue):
        return _format_sequence(node)
    if isinstance(node, MappingValue):
        return _format_mapping(node)
    return _format_scalar(insight_kind(key), node.value)


def insight_rows(insights: Dict[str, Any]) -> List[Tuple[str, str]]:
    if not isinstance(insights, dict):
        return []
    return [(prettify_key(k), format_insight(k, v)) for k, v in insights.items()]
