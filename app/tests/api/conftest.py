import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import limiter
from infrastructure.auth import Identity, StaticAuthProvider
from infrastructure.services import (
    get_assignment_orchestrator,
    get_auth_provider,
    get_email_channel,
    get_emergency_orchestrator,
    get_notification_service,
    get_progress_orchestrator,
)
from server.server import create_app

NURSE_TOKEN = "nurse-token"
DOCTOR_TOKEN = "doctor-token"


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def auth_provider(document_store):
    return StaticAuthProvider(
        document_store,
        identities={
            NURSE_TOKEN: Identity(uid="N7", role="nurse"),
            DOCTOR_TOKEN: Identity(uid="D1", role="doctor"),
        },
    )


@pytest.fixture
def app(
    auth_provider,
    notification_service,
    email_channel,
    emergency_orchestrator,
    assignment_orchestrator,
    progress_orchestrator,
):
    app = create_app()
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_notification_service] = lambda: notification_service
    app.dependency_overrides[get_email_channel] = lambda: email_channel
    app.dependency_overrides[get_emergency_orchestrator] = lambda: emergency_orchestrator
    app.dependency_overrides[get_assignment_orchestrator] = (
        lambda: assignment_orchestrator
    )
    app.dependency_overrides[get_progress_orchestrator] = lambda: progress_orchestrator
    return app


@pytest.fixture
def client(app):
    # No context manager: the lifespan (logging setup, scheduler) is not started
    return TestClient(app)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
