"""Aggregation pipeline execution."""

from __future__ import annotations

import json
import logging
from typing import Any, Hashable, Iterable, Mapping

from memstore.filtering import FilterEvaluator
from memstore.parsing.pipeline_parser import (
    GROUP_ID_FIELD,
    GroupStage,
    LimitStage,
    MatchStage,
    SortStage,
    Stage,
    parse_pipeline,
)
from memstore.paths import MISSING, resolve_path
from memstore.sorting import sort_documents
from memstore.values import is_number

logger = logging.getLogger(__name__)


def _group_key(value: Any) -> Hashable:
    """Dict key for a group value; unhashable values use their canonical JSON text."""
    try:
        hash(value)
    except TypeError:
        return ("__json__", json.dumps(value, sort_keys=True, default=str))
    # 1 and True hash equal; keep them in separate groups
    if isinstance(value, bool):
        return ("bool", value)
    return ("value", value)


def apply_match(records: list[dict[str, Any]], stage: MatchStage) -> list[dict[str, Any]]:
    evaluator = FilterEvaluator(stage.filter)
    return [record for record in records if evaluator.matches(record)]


def apply_group(records: list[dict[str, Any]], stage: GroupStage) -> list[dict[str, Any]]:
    """Group records and run each accumulator, keeping first-seen group order."""
    if not stage.has_key:
        return []

    groups: dict[Hashable, dict[str, Any]] = {}
    for record in records:
        if stage.key_path is None:
            key_value = stage.key_constant
        else:
            key_value = resolve_path(record, stage.key_path)
            if key_value is MISSING:
                key_value = None

        key = _group_key(key_value)
        group = groups.get(key)
        if group is None:
            group = {GROUP_ID_FIELD: key_value}
            for accumulator in stage.accumulators:
                group[accumulator.output] = 0
            groups[key] = group

        for accumulator in stage.accumulators:
            if accumulator.field is None:
                group[accumulator.output] += accumulator.constant
                continue
            value = resolve_path(record, accumulator.field)
            if is_number(value):
                group[accumulator.output] += value

    return list(groups.values())


def apply_sort(records: list[dict[str, Any]], stage: SortStage) -> list[dict[str, Any]]:
    return sort_documents(records, stage.options)  # type: ignore[return-value]


def apply_limit(records: list[dict[str, Any]], stage: LimitStage) -> list[dict[str, Any]]:
    return records[: stage.count]


def run_pipeline(
    records: Iterable[Mapping[str, Any]], pipeline: Iterable[Stage | Mapping[str, Any]]
) -> list[dict[str, Any]]:
    """Run the stages in order, each consuming the previous stage's output.

    The input records are not modified; stages work on shallow copies of the
    record list and build new dicts for groups.
    """
    results: list[dict[str, Any]] = [dict(record) for record in records]
    for stage in parse_pipeline(pipeline):
        before = len(results)
        if isinstance(stage, MatchStage):
            results = apply_match(results, stage)
        elif isinstance(stage, GroupStage):
            results = apply_group(results, stage)
        elif isinstance(stage, SortStage):
            results = apply_sort(results, stage)
        elif isinstance(stage, LimitStage):
            results = apply_limit(results, stage)
        logger.debug("%s: %d -> %d records", type(stage).__name__, before, len(results))
    return results
