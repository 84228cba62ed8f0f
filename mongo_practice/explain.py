"""Helpers for reading ``explain("executionStats")`` output."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, TypeVar

from pymongo.collection import Collection

T = TypeVar("T")

INDEX_STAGES = ("IXSCAN", "COUNT_SCAN", "DISTINCT_SCAN", "EXPRESS_IXSCAN")


@dataclass
class PlanSummary:
    stage: str
    index_name: Optional[str]
    docs_examined: int
    keys_examined: int
    n_returned: int
    execution_ms: int
    is_covered: bool

    @property
    def used_index(self) -> bool:
        return self.index_name is not None


def _iter_stages(stage: Optional[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    if not stage:
        return
    yield stage
    yield from _iter_stages(stage.get("inputStage"))
    for child in stage.get("inputStages", []):
        yield from _iter_stages(child)
    # SBE plans on 7.0+ nest the classic tree under queryPlan
    yield from _iter_stages(stage.get("queryPlan"))


def _execution_stages(explain: Dict[str, Any]) -> Dict[str, Any]:
    stats = explain.get("executionStats") or {}
    if stats.get("executionStages"):
        return stats["executionStages"]
    # fall back to the planner's view when executionStats was not requested
    winning = (explain.get("queryPlanner") or {}).get("winningPlan") or {}
    return winning.get("queryPlan", winning)


def summarize_explain(explain: Dict[str, Any]) -> PlanSummary:
    stats = explain.get("executionStats") or {}
    root = _execution_stages(explain)

    index_name = None
    has_fetch = False
    for stage in _iter_stages(root):
        name = stage.get("stage")
        if name == "FETCH":
            has_fetch = True
        if index_name is None and name in INDEX_STAGES:
            index_name = stage.get("indexName")

    docs_examined = int(stats.get("totalDocsExamined", 0))
    return PlanSummary(
        stage=root.get("stage", "UNKNOWN"),
        index_name=index_name,
        docs_examined=docs_examined,
        keys_examined=int(stats.get("totalKeysExamined", 0)),
        n_returned=int(stats.get("nReturned", 0)),
        execution_ms=int(stats.get("executionTimeMillis", 0)),
        is_covered=index_name is not None and not has_fetch and docs_examined == 0,
    )


def timed(fn: Callable[[], T]) -> Tuple[T, float]:
    """Run ``fn`` and return its result with the elapsed wall time in ms."""
    start = time.perf_counter()
    result = fn()
    return result, (time.perf_counter() - start) * 1000


def explain_find(
    collection: Collection,
    query: Dict[str, Any],
    projection: Optional[Dict[str, Any]] = None,
    sort: Optional[Dict[str, int]] = None,
) -> Dict[str, Any]:
    """Run ``explain`` with executionStats verbosity for a find."""
    find: Dict[str, Any] = {"find": collection.name, "filter": query}
    if projection is not None:
        find["projection"] = projection
    if sort is not None:
        find["sort"] = sort
    return collection.database.command("explain", find, verbosity="executionStats")
