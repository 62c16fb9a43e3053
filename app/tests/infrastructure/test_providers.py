from unittest.mock import patch

import pytest

from infrastructure.auth import StaticAuthProvider
from infrastructure.persistence import InMemoryDocumentStore
from infrastructure.services import providers


@pytest.fixture(autouse=True)
def clear_provider_caches():
    cached = [
        providers.get_settings,
        providers.get_document_store,
        providers.get_notification_store,
        providers.get_notification_service,
        providers.get_email_channel,
        providers.get_staff_resolver,
        providers.get_auth_provider,
        providers.get_fanout,
        providers.get_emergency_orchestrator,
        providers.get_assignment_orchestrator,
        providers.get_progress_orchestrator,
    ]
    for provider in cached:
        provider.cache_clear()
    yield
    for provider in cached:
        provider.cache_clear()


@pytest.mark.unit
class TestProviders:
    def test_memory_store_by_default(self, monkeypatch):
        monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "memory")
        store = providers.get_document_store()
        assert isinstance(store, InMemoryDocumentStore)
        assert providers.get_document_store() is store

    def test_firestore_backend_initializes_firebase(self, monkeypatch):
        monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "firestore")
        with patch.object(providers, "init_firebase_app") as mock_init, patch.object(
            providers, "FirestoreDocumentStore"
        ) as mock_store:
            store = providers.get_document_store()
        mock_init.assert_called_once()
        assert store is mock_store.return_value

    def test_auth_disabled_trusts_tokens(self, monkeypatch):
        monkeypatch.setenv("AUTH_ENABLED", "false")
        monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "memory")
        provider = providers.get_auth_provider()
        assert isinstance(provider, StaticAuthProvider)
        assert provider.trust_tokens is True

    def test_workflows_share_one_notification_service(self, monkeypatch):
        monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "memory")
        emergency = providers.get_emergency_orchestrator()
        assert emergency.notifications is providers.get_notification_service()
        assert emergency.fanout is providers.get_fanout()
        assert providers.get_progress_orchestrator().fanout is emergency.fanout

    def test_audit_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "memory")
        monkeypatch.setenv("EMAIL_AUDIT_ENABLED", "false")
        assert providers.get_fanout().audit.enabled is False
