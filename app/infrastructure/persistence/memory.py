"""In-process document store used in development and tests."""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import structlog

from infrastructure.exceptions import DocumentNotFoundError
from infrastructure.persistence.documents import (
    Document,
    DocumentStore,
    OrderBy,
    QueryFilter,
    SnapshotCallback,
    SortDirection,
    Unsubscribe,
)
from infrastructure.resilience import RetryPolicy

logger = structlog.get_logger()

_MISSING = object()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def matches(document: Document, query_filter: QueryFilter) -> bool:
    """Evaluate one filter against a document.

    Documents missing the field never match. Values that cannot be compared
    (e.g. a string against a datetime) do not match either.
    """
    value = document.get(query_filter.field, _MISSING)
    if value is _MISSING:
        return False
    op, expected = query_filter.operator, query_filter.value
    try:
        if op == "==":
            return value == expected
        if op == "!=":
            return value != expected
        if op == "<":
            return value is not None and value < expected
        if op == "<=":
            return value is not None and value <= expected
        if op == ">":
            return value is not None and value > expected
        if op == ">=":
            return value is not None and value >= expected
        if op == "in":
            return value in expected
        if op == "array-contains":
            return isinstance(value, (list, tuple, set)) and expected in value
    except TypeError:
        return False
    return False


class InMemoryDocumentStore(DocumentStore):
    """Dict-of-collections store with real-time subscriptions.

    Documents keep insertion order, so unordered queries and scans return
    them in the order they were created.
    """

    backend_name = "memory"

    def __init__(
        self,
        retry_policy: Optional[RetryPolicy] = None,
        seed: Optional[Dict[str, Dict[str, Document]]] = None,
    ):
        super().__init__(retry_policy)
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._subscriptions: Dict[
            int, Tuple[str, SnapshotCallback, List[QueryFilter]]
        ] = {}
        self._next_subscription = 0
        for collection, documents in (seed or {}).items():
            for doc_id, data in documents.items():
                self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(
                    data
                )

    def _snapshot(self, collection: str, doc_id: str, data: Document) -> Document:
        document = copy.deepcopy(data)
        document["id"] = doc_id
        return document

    async def _create(
        self, collection: str, data: Document, doc_id: Optional[str]
    ) -> str:
        doc_id = doc_id or uuid.uuid4().hex
        now = _utcnow()
        data.setdefault("createdAt", now)
        data["updatedAt"] = now
        data.pop("id", None)
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        self._notify(collection)
        return doc_id

    async def _read(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return self._snapshot(collection, doc_id, data)

    async def _update(self, collection: str, doc_id: str, data: Document) -> None:
        documents = self._collections.get(collection, {})
        if doc_id not in documents:
            raise DocumentNotFoundError(collection, doc_id)
        data.pop("id", None)
        documents[doc_id].update(copy.deepcopy(data))
        documents[doc_id]["updatedAt"] = _utcnow()
        self._notify(collection)

    async def _delete(self, collection: str, doc_id: str) -> None:
        if self._collections.get(collection, {}).pop(doc_id, None) is not None:
            self._notify(collection)

    def _matching(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        results = [
            self._snapshot(collection, doc_id, data)
            for doc_id, data in self._collections.get(collection, {}).items()
            if all(matches(data, query_filter) for query_filter in filters)
        ]
        if order_by is not None:
            results = [doc for doc in results if doc.get(order_by.field) is not None]
            results.sort(
                key=lambda doc: doc[order_by.field],
                reverse=order_by.direction == SortDirection.DESCENDING,
            )
        if limit is not None:
            results = results[:limit]
        return results

    async def _query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[OrderBy],
        limit: Optional[int],
    ) -> List[Document]:
        return self._matching(collection, filters, order_by, limit)

    def _subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        filters: List[QueryFilter],
    ) -> Unsubscribe:
        key = self._next_subscription
        self._next_subscription += 1
        self._subscriptions[key] = (collection, callback, filters)
        self._deliver(key)

        def unsubscribe() -> None:
            self._subscriptions.pop(key, None)

        return unsubscribe

    def _deliver(self, key: int) -> None:
        subscription = self._subscriptions.get(key)
        if subscription is None:
            return
        collection, callback, filters = subscription
        try:
            callback(self._matching(collection, filters))
        except Exception as e:
            logger.error(
                "document_subscription_callback_failed",
                collection=collection,
                error=str(e),
            )

    def _notify(self, collection: str) -> None:
        for key, (subscribed, _, _) in list(self._subscriptions.items()):
            if subscribed == collection:
                self._deliver(key)

    def dump(self, collection: str) -> List[Dict[str, Any]]:
        """Return every document in a collection, for assertions in tests."""
        return self._matching(collection, [])
