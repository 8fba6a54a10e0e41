"""Collapse duplicate report records.

The backend can list the same report more than once while a generation
request is still in flight. Two records are the same report when they share
title, type, creator and parameters; the newest one wins.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Tuple

from .models import parse_timestamp, report_parameters, report_title

DedupKey = Tuple[str, str, str, str]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, default=str)


def dedup_key(report: Dict[str, Any]) -> DedupKey:
    params = json.dumps(report_parameters(report), sort_keys=True, separators=(",", ":"), default=str)
    return (
        report_title(report),
        _text(report.get("type")),
        _text(report.get("createdBy")),
        params,
    )


def dedupe_reports(reports: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the latest record per dedup key, in first-seen key order."""
    latest: Dict[DedupKey, Dict[str, Any]] = {}
    for report in reports:
        if not isinstance(report, dict):
            continue
        key = dedup_key(report)
        previous = latest.get(key)
        if previous is None or _created(report) > _created(previous):
            latest[key] = report
    return list(latest.values())


def _created(report: Dict[str, Any]) -> datetime:
    return parse_timestamp(report.get("createdAt")) or _EPOCH


def key_set(reports: Iterable[Dict[str, Any]]) -> FrozenSet[DedupKey]:
    return frozenset(dedup_key(r) for r in reports)


def same_key_set(a: Iterable[Dict[str, Any]], b: Iterable[Dict[str, Any]]) -> bool:
    return key_set(a) == key_set(b)
