"""Cloud Firestore document store backed by the Firebase Admin SDK.

The Admin SDK is synchronous; every call is moved off the event loop with
``asyncio.to_thread``.
"""

import asyncio
import os
from typing import Any, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore import FieldFilter

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

# Firestore spells the membership operator with an underscore
_OPERATOR_NAMES = {"array-contains": "array_contains"}


def init_firebase_app(
    credentials_path: str, project_id: Optional[str] = None
) -> firebase_admin.App:
    """Initialize the default Firebase app once per process.

    Args:
        credentials_path: Path to a service account JSON file
        project_id: Optional explicit project id

    Returns:
        The default Firebase app.

    Raises:
        RuntimeError: The credentials file does not exist.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()
    if not os.path.exists(credentials_path):
        raise RuntimeError(f"Firebase credentials not found at: {credentials_path}")
    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(
        credentials.Certificate(credentials_path), options
    )
    logger.info("firebase_initialized", project_id=project_id)
    return app


def _to_document(snapshot: Any) -> Document:
    document = snapshot.to_dict() or {}
    document["id"] = snapshot.id
    return document


class FirestoreDocumentStore(DocumentStore):
    """DocumentStore over a ``google.cloud.firestore.Client``."""

    backend_name = "firestore"

    def __init__(self, client: Any = None, retry_policy: Optional[RetryPolicy] = None):
        super().__init__(retry_policy)
        self._client = client or firestore.client()

    def _build_query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ):
        query = self._client.collection(collection)
        for query_filter in filters:
            query = query.where(
                filter=FieldFilter(
                    query_filter.field,
                    _OPERATOR_NAMES.get(query_filter.operator, query_filter.operator),
                    query_filter.value,
                )
            )
        if order_by is not None:
            direction = (
                firestore.Query.DESCENDING
                if order_by.direction == SortDirection.DESCENDING
                else firestore.Query.ASCENDING
            )
            query = query.order_by(order_by.field, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return query

    async def _create(
        self, collection: str, data: Document, doc_id: Optional[str]
    ) -> str:
        def _write() -> str:
            collection_ref = self._client.collection(collection)
            ref = collection_ref.document(doc_id) if doc_id else collection_ref.document()
            data.pop("id", None)
            data.setdefault("createdAt", firestore.SERVER_TIMESTAMP)
            data["updatedAt"] = firestore.SERVER_TIMESTAMP
            ref.set(data)
            return ref.id

        return await asyncio.to_thread(_write)

    async def _read(self, collection: str, doc_id: str) -> Optional[Document]:
        def _get() -> Optional[Document]:
            snapshot = self._client.collection(collection).document(doc_id).get()
            return _to_document(snapshot) if snapshot.exists else None

        return await asyncio.to_thread(_get)

    async def _update(self, collection: str, doc_id: str, data: Document) -> None:
        def _write() -> None:
            ref = self._client.collection(collection).document(doc_id)
            if not ref.get().exists:
                raise DocumentNotFoundError(collection, doc_id)
            data.pop("id", None)
            data["updatedAt"] = firestore.SERVER_TIMESTAMP
            ref.update(data)

        await asyncio.to_thread(_write)

    async def _delete(self, collection: str, doc_id: str) -> None:
        await asyncio.to_thread(
            lambda: self._client.collection(collection).document(doc_id).delete()
        )

    async def _query(
        self,
        collection: str,
        filters: List[QueryFilter],
        order_by: Optional[OrderBy],
        limit: Optional[int],
    ) -> List[Document]:
        query = self._build_query(collection, filters, order_by, limit)
        return await asyncio.to_thread(
            lambda: [_to_document(snapshot) for snapshot in query.stream()]
        )

    def _subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        filters: List[QueryFilter],
    ) -> Unsubscribe:
        query = self._build_query(collection, filters)

        def _on_snapshot(snapshots, changes, read_time) -> None:
            try:
                callback([_to_document(snapshot) for snapshot in snapshots])
            except Exception as e:
                logger.error(
                    "document_subscription_callback_failed",
                    collection=collection,
                    error=str(e),
                )

        watch = query.on_snapshot(_on_snapshot)
        return watch.unsubscribe
