from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from core.config import Settings, settings
from core.logging import get_module_logger

logger = get_module_logger()


def _list_configs(app_settings: Settings, log: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in app_settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    log.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            log.info("configuration_loaded", config_setting=key, keys=value)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.settings = settings

    logger.info("application_startup", region=settings.aws.AWS_REGION)
    _list_configs(settings, logger)

    yield

    logger.info("application_shutdown")
