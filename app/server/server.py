from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies.rate_limits import setup_rate_limiter
from api.router import api_router
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()

DEVELOPMENT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:8000",
]


def _allow_origins() -> list:
    settings = get_settings()
    if settings.server.cors_origins:
        return settings.server.cors_origins
    return ["*"] if settings.is_production else DEVELOPMENT_ORIGINS


def create_app() -> FastAPI:
    """Build the ASGI application."""
    app = FastAPI(title="carebridge", lifespan=lifespan)
    setup_rate_limiter(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        with bind_request_context(
            correlation_id=request.headers.get("X-Correlation-ID"),
            request_path=request.url.path,
            request_method=request.method,
        ):
            response = await call_next(request)
        return response

    app.include_router(api_router)
    return app


handler = create_app()
