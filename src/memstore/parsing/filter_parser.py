"""Parser for filter expressions.

A raw filter is a mapping of field path to either a literal or an operator
map such as ``{"$gte": 5, "$lt": 10}``. Parsing turns operator keys into the
closed ``Operator`` enum once, so evaluation never sees free-form keys.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class Operator(Enum):
    """Operators accepted inside an operator map."""

    IN = "$in"
    NOT_IN = "$nin"
    NOT_EQUAL = "$ne"
    GREATER_OR_EQUAL = "$gte"
    GREATER_THAN = "$gt"
    LESS_OR_EQUAL = "$lte"
    LESS_THAN = "$lt"

    @property
    def is_set_operator(self) -> bool:
        return self in (Operator.IN, Operator.NOT_IN)

    @property
    def is_range_operator(self) -> bool:
        return self in _RANGE_OPERATORS


_RANGE_OPERATORS = frozenset({
    Operator.GREATER_OR_EQUAL,
    Operator.GREATER_THAN,
    Operator.LESS_OR_EQUAL,
    Operator.LESS_THAN,
})

OPERATOR_KEYS: dict[str, Operator] = {op.value: op for op in Operator}


@dataclass
class OperatorClause:
    """A single operator applied to a field, e.g. ``$in: ["a", "b"]``."""

    operator: Operator
    operand: Any


@dataclass
class Condition:
    """A filter condition on one field path.

    Exactly one of ``literal`` (string-form equality) or ``clauses`` applies,
    selected by ``is_literal``.
    """

    path: str
    literal: Any = None
    clauses: list[OperatorClause] = field(default_factory=list)
    is_literal: bool = True


@dataclass
class FilterExpression:
    """All conditions of a filter; a record matches when every one holds."""

    conditions: list[Condition] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.conditions)


def is_operator_map(spec: Any) -> bool:
    """True for a mapping with at least one ``$``-prefixed key."""
    return isinstance(spec, Mapping) and any(
        isinstance(key, str) and key.startswith("$") for key in spec
    )


def parse_condition(path: str, spec: Any) -> Condition:
    """Parse one ``path: spec`` entry of a filter."""
    if not is_operator_map(spec):
        return Condition(path=path, literal=spec)

    clauses = []
    for key, operand in spec.items():
        operator = OPERATOR_KEYS.get(key)
        if operator is None:
            logger.warning("Ignoring unsupported filter operator %r on field '%s'", key, path)
            continue
        clauses.append(OperatorClause(operator=operator, operand=operand))
    return Condition(path=path, clauses=clauses, is_literal=False)


def parse_filter(raw: Mapping[str, Any] | FilterExpression | None) -> FilterExpression:
    """Parse a raw filter mapping. An already-parsed expression is returned as is."""
    if raw is None:
        return FilterExpression()
    if isinstance(raw, FilterExpression):
        return raw
    return FilterExpression(
        conditions=[parse_condition(str(path), spec) for path, spec in raw.items()]
    )
