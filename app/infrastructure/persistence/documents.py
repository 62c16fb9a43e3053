"""Document store contract shared by every persistence backend.

The store is addressed by collection name and document id. Documents are
plain dicts; reads and queries return them with their id under ``"id"``.

Public calls validate their arguments first and raise
DocumentValidationError straight away; only the backend call itself is
wrapped in the retry policy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from infrastructure.exceptions import DocumentValidationError
from infrastructure.resilience import RetryPolicy, retry_operation

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], None]
Unsubscribe = Callable[[], None]

FILTER_OPERATORS = frozenset(
    {"==", "!=", "<", "<=", ">", ">=", "in", "array-contains"}
)


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class QueryFilter:
    """A single ``field operator value`` condition."""

    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: SortDirection = SortDirection.ASCENDING


def validate_collection(collection: Any) -> None:
    if not isinstance(collection, str) or not collection.strip():
        raise DocumentValidationError("collection name is required")


def validate_doc_id(doc_id: Any) -> None:
    if not isinstance(doc_id, str) or not doc_id.strip():
        raise DocumentValidationError("document id is required")


def validate_data(data: Any) -> None:
    if not isinstance(data, dict):
        raise DocumentValidationError("document data must be a dict")


def validate_filters(filters: Any) -> List[QueryFilter]:
    """Check filter shape and return the filters as a list.

    Raises:
        DocumentValidationError: filters is not a list/tuple, or an entry has
            no field, an unknown operator, or a list operator without a list.
    """
    if filters is None:
        return []
    if not isinstance(filters, (list, tuple)):
        raise DocumentValidationError("filters must be a list of QueryFilter")
    checked = []
    for query_filter in filters:
        if not isinstance(query_filter, QueryFilter):
            raise DocumentValidationError(
                f"unsupported filter shape: {query_filter!r}"
            )
        if not query_filter.field:
            raise DocumentValidationError("filter field is required")
        if query_filter.operator not in FILTER_OPERATORS:
            raise DocumentValidationError(
                f"unknown filter operator: {query_filter.operator!r}"
            )
        if query_filter.operator == "in" and not isinstance(
            query_filter.value, (list, tuple, set, frozenset)
        ):
            raise DocumentValidationError("'in' filter requires a collection value")
        checked.append(query_filter)
    return checked


class DocumentStore(ABC):
    """Async document store with retry-wrapped backend calls.

    Subclasses implement the underscored backend hooks; the public methods
    validate input, then run the hook through :func:`retry_operation`.
    """

    def __init__(self, retry_policy: Optional[RetryPolicy] = None):
        self.retry_policy = retry_policy or RetryPolicy()

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short backend name used in logs."""

    async def create(
        self, collection: str, data: Document, doc_id: Optional[str] = None
    ) -> str:
        """Persist a new document and return its id.

        ``createdAt`` and ``updatedAt`` are assigned by the store. A
        caller-supplied ``createdAt`` is kept.
        """
        validate_collection(collection)
        validate_data(data)
        if doc_id is not None:
            validate_doc_id(doc_id)
        return await retry_operation(
            lambda: self._create(collection, dict(data), doc_id),
            policy=self.retry_policy,
            operation_name=f"{self.backend_name}.create:{collection}",
        )

    async def read(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document or None when it does not exist."""
        validate_collection(collection)
        validate_doc_id(doc_id)
        return await retry_operation(
            lambda: self._read(collection, doc_id),
            policy=self.retry_policy,
            operation_name=f"{self.backend_name}.read:{collection}",
        )

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Merge ``data`` into an existing document.

        Raises:
            DocumentNotFoundError: The document does not exist.
        """
        validate_collection(collection)
        validate_doc_id(doc_id)
        validate_data(data)
        await retry_operation(
            lambda: self._update(collection, doc_id, dict(data)),
            policy=self.retry_policy,
            operation_name=f"{self.backend_name}.update:{collection}",
        )

    async def delete(self, collection: str, doc_id: str) -> None:
        validate_collection(collection)
        validate_doc_id(doc_id)
        await retry_operation(
            lambda: self._delete(collection, doc_id),
            policy=self.retry_policy,
            operation_name=f"{self.backend_name}.delete:{collection}",
        )

    async def query(
        self,
        collection: str,
        filters: Optional[Sequence[QueryFilter]] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Return documents matching every filter.

        Args:
            collection: Collection name
            filters: Conditions combined with AND
            order_by: Optional sort; documents missing the field are excluded
            limit: Optional positive maximum number of documents

        Returns:
            Matching documents, each with its ``id``.
        """
        validate_collection(collection)
        checked = validate_filters(filters)
        if limit is not None and (not isinstance(limit, int) or limit <= 0):
            raise DocumentValidationError("limit must be a positive integer")
        return await retry_operation(
            lambda: self._query(collection, checked, order_by, limit),
            policy=self.retry_policy,
            operation_name=f"{self.backend_name}.query:{collection}",
        )

    def subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        filters: Optional[Sequence[QueryFilter]] = None,
    ) -> Unsubscribe:
        """Invoke ``callback`` with the matching set on every change.

        Returns:
            A callable that stops the subscription.
        """
        validate_collection(collection)
        if not callable(callback):
            raise DocumentValidationError("callback must be callable")
        return self._subscribe(collection, callback, validate_filters(filters))

    @abstractmethod
    async def _create(
        self, collection: str, data: Document, doc_id: Optional[str]
    ) -> str: ...

    @abstractmethod
    async def _read(self, collection: str, doc_id: str) -> Optional[Document]: ...

    @abstractmethod
    async def _update(self, collection: str, doc_id: str, data: Document) -> None: ...

    @abstractmethod
    async def _delete(self, collection: str, doc_id: str) -> None: ...

    @abstractmethod
    async def _query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[OrderBy],
        limit: Optional[int],
    ) -> List[Document]: ...

    @abstractmethod
    def _subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        filters: List[QueryFilter],
    ) -> Unsubscribe: ...
