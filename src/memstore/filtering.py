"""Filter evaluation over serialized records."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from memstore.config import StoreConfig
from memstore.parsing.filter_parser import (
    Condition,
    FilterExpression,
    Operator,
    OperatorClause,
    parse_filter,
)
from memstore.paths import MISSING, resolve_path
from memstore.values import compare_native, orderable, to_text

logger = logging.getLogger(__name__)

_SET_OPERAND_TYPES = (list, tuple, set, frozenset)


class FilterEvaluator:
    """Decides whether serialized records match a filter expression.

    Evaluation is total: missing fields, malformed operands and values that
    cannot be compared make a condition fail instead of raising.
    """

    def __init__(self, expression: FilterExpression | Mapping[str, Any] | None) -> None:
        self.expression = parse_filter(expression)

    def matches(self, document: Mapping[str, Any]) -> bool:
        """Return True when every condition holds for the document."""
        for condition in self.expression.conditions:
            if not self._evaluate_condition(document, condition):
                logger.debug("Filter condition on '%s' failed", condition.path)
                return False
        return True

    def __call__(self, document: Mapping[str, Any]) -> bool:
        return self.matches(document)

    def _evaluate_condition(self, document: Mapping[str, Any], condition: Condition) -> bool:
        value = resolve_path(document, condition.path)
        if condition.is_literal:
            if value is MISSING:
                return False
            return to_text(value) == to_text(condition.literal)
        return all(self._evaluate_clause(value, clause) for clause in condition.clauses)

    def _evaluate_clause(self, value: Any, clause: OperatorClause) -> bool:
        operator = clause.operator
        operand = clause.operand

        if operator.is_set_operator:
            if not isinstance(operand, _SET_OPERAND_TYPES):
                logger.debug("%s expects a list operand, got %r", operator.value, operand)
                return False
            found = self._intersects(value, operand)
            return found if operator is Operator.IN else not found

        if operator is Operator.NOT_EQUAL:
            if value is MISSING:
                return operand is not None
            return to_text(value) != to_text(operand)

        if not operator.is_range_operator:
            return False
        if value is MISSING or value is None or not orderable(value, operand):
            return False
        result = compare_native(value, operand)
        if operator is Operator.GREATER_OR_EQUAL:
            return result >= 0
        if operator is Operator.GREATER_THAN:
            return result > 0
        if operator is Operator.LESS_OR_EQUAL:
            return result <= 0
        return result < 0

    @staticmethod
    def _intersects(value: Any, operand: Any) -> bool:
        """Case-insensitive membership of a scalar, or any list element, in operand."""
        if value is MISSING or value is None:
            return False
        wanted = {to_text(item).lower() for item in operand}
        if isinstance(value, list):
            return any(to_text(item).lower() in wanted for item in value)
        return to_text(value).lower() in wanted


def matches_search(document: Mapping[str, Any], term: str | None, config: StoreConfig) -> bool:
    """Case-insensitive substring search on the field configured for the record's type."""
    if not term:
        return True
    search_field = config.search_field_for(document.get(config.type_field))
    if search_field is None:
        logger.debug("No search field configured for type %r", document.get(config.type_field))
        return False
    value = resolve_path(document, search_field)
    if not isinstance(value, str):
        return False
    return term.lower() in value.lower()
