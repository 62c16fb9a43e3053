import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import get_notification_service, get_settings
from jobs import scheduled_tasks

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(settings=settings)


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _start_scheduled_tasks(
    app: FastAPI,
    settings: "Settings",
    logger: BoundLogger,
) -> Optional[asyncio.Event]:
    if not settings.notifications.scheduler_enabled:
        logger.info("scheduled_tasks_skipped", reason="scheduler_disabled")
        return None

    scheduler = scheduled_tasks.init(get_notification_service(), settings)
    stop_event = asyncio.Event()
    app.state.scheduler_task = asyncio.create_task(
        scheduled_tasks.run_continuously(scheduler, stop_event),
        name="scheduled-tasks",
    )
    logger.info("scheduled_tasks_started")
    return stop_event


async def _stop_scheduled_tasks(app: FastAPI, stop_event: Optional[asyncio.Event]) -> None:
    if stop_event is None:
        return
    stop_event.set()
    await app.state.scheduler_task


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    app.state.scheduled_stop_event = _start_scheduled_tasks(app, settings, logger)

    yield

    logger.info("application_shutdown")

    await _stop_scheduled_tasks(app, app.state.scheduled_stop_event)
    await get_notification_service().shutdown()
    logger.info("delayed_notifications_cancelled")
