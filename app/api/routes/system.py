from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import EmailChannelDep, SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()


# Load balancer health checks hit these often, hence the generous limit
@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Get the version of the application."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(request: Request, email: EmailChannelDep):  # pylint: disable=unused-argument
    """Healthcheck endpoint, including the configured email transport."""
    email_check = email.health_check()
    return {
        "status": "ok",
        "email": {
            "provider": email.provider,
            "healthy": email_check.is_success,
            "message": email_check.message,
        },
    }
