"""Document persistence backends."""

from infrastructure.persistence.documents import (
    Document,
    DocumentStore,
    OrderBy,
    QueryFilter,
    SortDirection,
)
from infrastructure.persistence.memory import InMemoryDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "OrderBy",
    "QueryFilter",
    "SortDirection",
]
