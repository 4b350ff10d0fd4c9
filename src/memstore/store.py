"""Scoped in-memory document store."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Generic, Iterable, Mapping, TypeVar, Union

from memstore.aggregation import run_pipeline
from memstore.config import StoreConfig
from memstore.errors import (
    AlreadyExistsError,
    IdentifierMismatchError,
    InvalidArgumentError,
    NotFoundError,
)
from memstore.filtering import FilterEvaluator, matches_search
from memstore.pagination import Page, PaginationOptions, paginate
from memstore.parsing.filter_parser import FilterExpression
from memstore.parsing.pipeline_parser import Stage
from memstore.parsing.sort_parser import SortOption, parse_sort
from memstore.sorting import sort_by_document

logger = logging.getLogger(__name__)

T = TypeVar("T")

Document = Dict[str, Any]
Filter = Union[Mapping[str, Any], FilterExpression]


class ScopedStore(Generic[T]):
    """An in-memory stand-in for a remote document database.

    Records of any type are kept in partitions: one global partition plus one
    per owner key (e.g. a user id). Each partition holds the records and, in
    parallel, their serialized form, which is what filters, sorts and
    aggregations look at. The store never inspects records directly; it
    relies on the ``to_json`` and ``get_id`` functions it is built with.

    The owner key equal to ``config.global_partition`` (by default
    ``"__global_data__"``) is reserved; passing it as an owner raises
    InvalidArgumentError.

    Not thread-safe. Callers sharing a store across threads must serialize
    access themselves.
    """

    def __init__(
        self,
        to_json: Callable[[T], Mapping[str, Any]],
        get_id: Callable[[T], str],
        initial_data: Iterable[T] | None = None,
        config: StoreConfig | None = None,
    ) -> None:
        """Create a store, optionally preloading the global partition.

        Args:
            to_json: Converts a record to its serialized form.
            get_id: Extracts a record's identifier.
            initial_data: Records inserted into the global partition.
            config: Store settings; defaults to StoreConfig().

        Raises:
            InvalidArgumentError: If initial_data contains a duplicate
                identifier. Nothing is stored in that case.
        """
        self._to_json = to_json
        self._get_id = get_id
        self.config = config or StoreConfig()
        # partition → id → record, and partition → id → serialized record
        self._records: dict[str, dict[str, T]] = {}
        self._documents: dict[str, dict[str, Document]] = {}

        if initial_data is not None:
            self._preload(list(initial_data))

    def _preload(self, items: list[T]) -> None:
        ids = [self._get_id(item) for item in items]
        seen: set[str] = set()
        for item_id in ids:
            if item_id in seen:
                raise InvalidArgumentError(f"Duplicate ID '{item_id}' found in initial data")
            seen.add(item_id)

        serialized = [self._serialize(item) for item in items]

        records, documents = self._partition(None)
        for item_id, item, document in zip(ids, items, serialized):
            records[item_id] = item
            documents[item_id] = document
        logger.debug("Loaded %d initial records into the global partition", len(items))

    # --- Partitions ---

    def _partition_key(self, owner: str | None) -> str:
        if owner is None:
            return self.config.global_partition
        if owner == self.config.global_partition:
            raise InvalidArgumentError(f"Owner key '{owner}' is reserved for the global partition")
        return owner

    @staticmethod
    def _scope(owner: str | None) -> str:
        return "global" if owner is None else owner

    def _partition(self, owner: str | None) -> tuple[dict[str, T], dict[str, Document]]:
        """Return the record and document maps for an owner, creating them on first use."""
        key = self._partition_key(owner)
        records = self._records.setdefault(key, {})
        documents = self._documents.setdefault(key, {})
        return records, documents

    def _serialize(self, item: T) -> Document:
        return copy.deepcopy(dict(self._to_json(item)))

    def partitions(self) -> list[str]:
        """Names of the partitions created so far."""
        return list(self._records)

    def snapshot(self, owner: str | None = None) -> dict[str, Document]:
        """Deep copy of a partition's serialized records, keyed by identifier."""
        documents = self._documents.get(self._partition_key(owner), {})
        return copy.deepcopy(documents)

    # --- CRUD ---

    def create(self, item: T, owner: str | None = None) -> T:
        """Store a new record.

        Raises:
            AlreadyExistsError: If the identifier is already in the partition.
        """
        item_id = self._get_id(item)
        scope = self._scope(owner)
        logger.debug("CREATE START: id='%s', scope='%s'", item_id, scope)
        records, documents = self._partition(owner)

        if item_id in records:
            logger.warning("CREATE FAILED: id='%s' already exists for scope '%s'", item_id, scope)
            raise AlreadyExistsError(item_id, scope)

        document = self._serialize(item)
        records[item_id] = item
        documents[item_id] = document
        logger.info(
            "CREATE SUCCESS: id='%s' added to scope '%s'. Total items: %d",
            item_id, scope, len(records),
        )
        return item

    def read(self, item_id: str, owner: str | None = None) -> T:
        """Return the record stored under an identifier.

        Raises:
            NotFoundError: If the identifier is not in the partition.
        """
        scope = self._scope(owner)
        logger.debug("READ START: id='%s', scope='%s'", item_id, scope)
        records, _ = self._partition(owner)

        if item_id not in records:
            logger.warning("READ FAILED: id='%s' not found for scope '%s'", item_id, scope)
            raise NotFoundError(item_id, scope)

        logger.info("READ SUCCESS: id='%s' found for scope '%s'", item_id, scope)
        return records[item_id]

    def update(self, item_id: str, item: T, owner: str | None = None) -> T:
        """Replace the record stored under an identifier.

        Raises:
            IdentifierMismatchError: If the record's own identifier differs
                from item_id. Checked before existence.
            NotFoundError: If the identifier is not in the partition.
        """
        scope = self._scope(owner)
        logger.debug("UPDATE START: id='%s', scope='%s'", item_id, scope)

        incoming_id = self._get_id(item)
        if incoming_id != item_id:
            logger.warning(
                "UPDATE FAILED: ID mismatch: incoming '%s', path '%s' for scope '%s'",
                incoming_id, item_id, scope,
            )
            raise IdentifierMismatchError(item_id, incoming_id, scope)

        records, documents = self._partition(owner)
        if item_id not in records:
            logger.warning("UPDATE FAILED: id='%s' not found for scope '%s'", item_id, scope)
            raise NotFoundError(item_id, scope)

        document = self._serialize(item)
        records[item_id] = item
        documents[item_id] = document
        logger.info("UPDATE SUCCESS: id='%s' updated for scope '%s'", item_id, scope)
        return item

    def delete(self, item_id: str, owner: str | None = None) -> None:
        """Remove a record.

        Raises:
            NotFoundError: If the identifier is not in the partition.
        """
        scope = self._scope(owner)
        logger.debug("DELETE START: id='%s', scope='%s'", item_id, scope)
        records, documents = self._partition(owner)

        if item_id not in records:
            logger.warning("DELETE FAILED: id='%s' not found for scope '%s'", item_id, scope)
            raise NotFoundError(item_id, scope)

        del records[item_id]
        del documents[item_id]
        logger.info(
            "DELETE SUCCESS: id='%s' deleted for scope '%s'. Total items: %d",
            item_id, scope, len(records),
        )

    # --- Queries ---

    def _split_search(self, filter: Filter | None) -> tuple[Filter | None, str | None]:
        """Remove the search term from a copy of the filter."""
        if not isinstance(filter, Mapping) or self.config.search_key not in filter:
            return filter, None
        remaining = dict(filter)
        term = remaining.pop(self.config.search_key)
        if term is not None and not isinstance(term, str):
            term = str(term)
        return remaining, term

    def _matching_ids(self, documents: dict[str, Document], filter: Filter | None) -> list[str]:
        """Identifiers of matching documents, in partition order."""
        remaining, term = self._split_search(filter)
        evaluator = FilterEvaluator(remaining)
        return [
            doc_id
            for doc_id, document in documents.items()
            if evaluator.matches(document) and matches_search(document, term, self.config)
        ]

    def count(self, filter: Filter | None = None, owner: str | None = None) -> int:
        """Number of records in the partition matching the filter."""
        scope = self._scope(owner)
        logger.debug("COUNT START: scope='%s', filter=%r", scope, filter)
        _, documents = self._partition(owner)

        total = len(self._matching_ids(documents, filter)) if filter else len(documents)
        logger.info("COUNT SUCCESS: scope='%s', count=%d", scope, total)
        return total

    def read_all(
        self,
        filter: Filter | None = None,
        sort: Iterable[SortOption | str | tuple[str, Any]] | Mapping[str, Any] | None = None,
        pagination: PaginationOptions | None = None,
        owner: str | None = None,
    ) -> Page[T]:
        """Filter, sort and paginate the records of a partition.

        Args:
            filter: Field path → literal or operator map. The configured
                search key (default "q") holds a free-text search term.
            sort: Sort keys in priority order, or a ``{field: direction}`` mapping.
            pagination: Cursor and page size.
            owner: Partition owner; None for the global partition.

        Returns:
            The requested page, with the cursor of the next page if any.
        """
        scope = self._scope(owner)
        logger.debug("READ_ALL START: scope='%s', filter=%r, sort=%r", scope, filter, sort)
        records, documents = self._partition(owner)

        matched_ids = self._matching_ids(documents, filter)
        options = parse_sort(sort)
        if options:
            matched_ids = sort_by_document(matched_ids, documents.__getitem__, options)

        id_page = paginate(matched_ids, lambda doc_id: doc_id, pagination)
        page: Page[T] = Page(
            items=[records[doc_id] for doc_id in id_page.items],
            next_cursor=id_page.next_cursor,
            has_more=id_page.has_more,
        )
        logger.info(
            "READ_ALL SUCCESS: scope='%s', matched=%d, returned=%d, has_more=%s",
            scope, len(matched_ids), len(page.items), page.has_more,
        )
        return page

    def aggregate(
        self, pipeline: Iterable[Stage | Mapping[str, Any]], owner: str | None = None
    ) -> list[dict[str, Any]]:
        """Run an aggregation pipeline over the partition's serialized records."""
        scope = self._scope(owner)
        pipeline = list(pipeline)
        logger.debug("AGGREGATE START: scope='%s', pipeline=%r", scope, pipeline)
        _, documents = self._partition(owner)

        results = run_pipeline(copy.deepcopy(list(documents.values())), pipeline)
        logger.info("AGGREGATE SUCCESS: scope='%s', resultCount=%d", scope, len(results))
        return results
