"""Shared fixtures.

Every fixture builds real collaborators on the in-memory document store;
only the email transport is replaced, by a recorder from the factories.
"""

import pytest
import structlog

from infrastructure.configuration import Settings
from infrastructure.notifications import (
    EmailChannel,
    NotificationDispatcher,
    NotificationService,
    NotificationStore,
    RecordingPresenter,
)
from infrastructure.persistence import InMemoryDocumentStore
from infrastructure.resilience import RetryPolicy
from modules.alerts import (
    AssignmentOrchestrator,
    EmailAuditLog,
    EmergencyOrchestrator,
    FanOut,
    ProgressOrchestrator,
)
from modules.care_team import StaffResolver
from tests.factories.care_team import make_directory
from tests.factories.email import RecordingTransport


@pytest.fixture(autouse=True)
def clear_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def retry_policy():
    """Three attempts without backoff so failing paths stay fast."""
    return RetryPolicy(max_attempts=3, base_delay_ms=0)


@pytest.fixture
def empty_store(retry_policy):
    return InMemoryDocumentStore(retry_policy=retry_policy)


@pytest.fixture
def document_store(retry_policy):
    """In-memory store seeded with one doctor, nurse, buddy and three patients."""
    return InMemoryDocumentStore(retry_policy=retry_policy, seed=make_directory())


@pytest.fixture
def notification_store(document_store):
    return NotificationStore(document_store)


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def dispatcher(notification_store, presenter):
    return NotificationDispatcher(notification_store, presenter=presenter)


@pytest.fixture
def notification_service(notification_store, dispatcher):
    return NotificationService(notification_store, dispatcher)


@pytest.fixture
def email_transport():
    return RecordingTransport()


@pytest.fixture
def email_channel(email_transport):
    return EmailChannel(email_transport)


@pytest.fixture
def audit_log(document_store):
    return EmailAuditLog(document_store)


@pytest.fixture
def fanout(notification_service, email_channel, audit_log):
    return FanOut(notification_service, email_channel, audit_log)


@pytest.fixture
def staff_resolver(document_store):
    return StaffResolver(document_store)


@pytest.fixture
def emergency_orchestrator(staff_resolver, notification_service, fanout):
    return EmergencyOrchestrator(staff_resolver, notification_service, fanout)


@pytest.fixture
def assignment_orchestrator(staff_resolver, fanout):
    return AssignmentOrchestrator(staff_resolver, fanout)


@pytest.fixture
def progress_orchestrator(staff_resolver, fanout):
    return ProgressOrchestrator(staff_resolver, fanout)
