"""Parsing of filter, sort and aggregation directives."""

from memstore.parsing.filter_parser import (
    Condition,
    FilterExpression,
    Operator,
    OperatorClause,
    parse_filter,
)
from memstore.parsing.pipeline_parser import (
    Accumulator,
    GroupStage,
    LimitStage,
    MatchStage,
    SortStage,
    Stage,
    parse_pipeline,
)
from memstore.parsing.sort_parser import SortOption, SortOrder, parse_sort

__all__ = [
    "Accumulator",
    "Condition",
    "FilterExpression",
    "GroupStage",
    "LimitStage",
    "MatchStage",
    "Operator",
    "OperatorClause",
    "SortOption",
    "SortOrder",
    "SortStage",
    "Stage",
    "parse_filter",
    "parse_pipeline",
    "parse_sort",
]
