"""Parser for aggregation pipelines.

Raw stages are single-key mappings in the document-database style::

    [
        {"$match": {"isPublished": True}},
        {"$group": {"_id": "$category.id", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": 5},
    ]

Unknown or malformed stages are dropped here with a warning so the
executor only ever sees well-formed stage objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from memstore.errors import InvalidArgumentError
from memstore.parsing.filter_parser import FilterExpression, parse_filter
from memstore.parsing.sort_parser import SortOption, parse_sort_mapping
from memstore.values import is_number

logger = logging.getLogger(__name__)

GROUP_ID_FIELD = "_id"


@dataclass
class Accumulator:
    """A $sum accumulator.

    Sums ``field`` when set, otherwise adds ``constant`` once per member
    (``constant=1`` counts members).
    """

    output: str
    field: str | None = None
    constant: int | float = 0


@dataclass
class MatchStage:
    """Keep records matching a filter."""

    filter: FilterExpression


@dataclass
class GroupStage:
    """Group records by a field path and accumulate per group.

    With ``key_path`` None every record falls into one group keyed by
    ``key_constant``. ``has_key`` is False when the raw stage had no ``_id``,
    which produces no groups at all.
    """

    key_path: str | None = None
    key_constant: Any = None
    accumulators: list[Accumulator] = field(default_factory=list)
    has_key: bool = True


@dataclass
class SortStage:
    """Stable sort by one or more keys."""

    options: list[SortOption] = field(default_factory=list)


@dataclass
class LimitStage:
    """Keep the first ``count`` records."""

    count: int


Stage = Union[MatchStage, GroupStage, SortStage, LimitStage]
STAGE_TYPES = (MatchStage, GroupStage, SortStage, LimitStage)


def _field_reference(value: str) -> str:
    """Strip the leading '$' of a field reference like '$category.id'."""
    return value[1:] if value.startswith("$") else value


def parse_accumulator(output: str, spec: Any) -> Accumulator | None:
    """Parse ``{"$sum": 1}`` or ``{"$sum": "$field"}``; None if unsupported."""
    if not isinstance(spec, Mapping) or len(spec) != 1:
        logger.warning("Ignoring malformed accumulator for '%s': %r", output, spec)
        return None
    op, operand = next(iter(spec.items()))
    if op != "$sum":
        logger.warning("Ignoring unsupported accumulator %r for '%s'", op, output)
        return None
    if isinstance(operand, str):
        return Accumulator(output=output, field=_field_reference(operand))
    if is_number(operand):
        return Accumulator(output=output, constant=operand)
    logger.warning("Ignoring $sum with unsupported operand %r for '%s'", operand, output)
    return None


def parse_group(spec: Mapping[str, Any]) -> GroupStage:
    accumulators = []
    for output, acc_spec in spec.items():
        if output == GROUP_ID_FIELD:
            continue
        accumulator = parse_accumulator(str(output), acc_spec)
        if accumulator is not None:
            accumulators.append(accumulator)

    if GROUP_ID_FIELD not in spec:
        logger.warning("$group stage has no '_id'; it will produce no groups")
        return GroupStage(accumulators=accumulators, has_key=False)
    key = spec[GROUP_ID_FIELD]
    if isinstance(key, str):
        return GroupStage(key_path=_field_reference(key), accumulators=accumulators)
    return GroupStage(key_constant=key, accumulators=accumulators)


def parse_stage(raw: Any) -> Stage | None:
    """Parse one raw stage; returns None for stages that should be skipped."""
    if isinstance(raw, STAGE_TYPES):
        return raw
    if not isinstance(raw, Mapping) or len(raw) != 1:
        logger.warning("Skipping malformed aggregation stage: %r", raw)
        return None

    name, spec = next(iter(raw.items()))
    if name == "$match":
        if isinstance(spec, (Mapping, FilterExpression)):
            return MatchStage(filter=parse_filter(spec))
    elif name == "$group":
        if isinstance(spec, Mapping):
            return parse_group(spec)
    elif name == "$sort":
        if isinstance(spec, Mapping):
            try:
                return SortStage(options=parse_sort_mapping(spec))
            except InvalidArgumentError as exc:
                logger.warning("Skipping $sort stage: %s", exc)
                return None
    elif name == "$limit":
        if isinstance(spec, int) and not isinstance(spec, bool):
            return LimitStage(count=max(spec, 0))
    else:
        logger.warning("Unsupported aggregation stage: %s", name)
        return None

    logger.warning("Skipping %s stage with malformed body: %r", name, spec)
    return None


def parse_pipeline(raw: Iterable[Any]) -> list[Stage]:
    """Parse every stage of a pipeline, dropping the ones that can't run."""
    stages = []
    for raw_stage in raw:
        stage = parse_stage(raw_stage)
        if stage is not None:
            stages.append(stage)
    return stages
