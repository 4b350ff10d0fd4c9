"""memstore - An in-memory, partitioned document store for tests and local development."""

from memstore.aggregation import run_pipeline
from memstore.config import GLOBAL_PARTITION, StoreConfig
from memstore.errors import (
    AlreadyExistsError,
    IdentifierMismatchError,
    InvalidArgumentError,
    NotFoundError,
    StoreError,
)
from memstore.filtering import FilterEvaluator
from memstore.pagination import Page, PaginationOptions
from memstore.parsing import SortOption, SortOrder
from memstore.paths import MISSING, resolve_path
from memstore.store import ScopedStore

__all__ = [
    # Main API
    "ScopedStore",
    "StoreConfig",
    "GLOBAL_PARTITION",
    # Query directives
    "SortOption",
    "SortOrder",
    "PaginationOptions",
    "Page",
    # Engine pieces
    "FilterEvaluator",
    "run_pipeline",
    "resolve_path",
    "MISSING",
    # Errors
    "StoreError",
    "AlreadyExistsError",
    "NotFoundError",
    "IdentifierMismatchError",
    "InvalidArgumentError",
]

__version__ = "0.1.0"
