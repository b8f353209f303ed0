from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncContextManager

from fastapi import FastAPI

from nesthunt.config import get_settings
from nesthunt.preferences import RecommendationCache

Hook = Callable[[FastAPI], Awaitable[None] | None]

_STATE_ATTRS = (
    "settings",
    "jurisdiction",
    "recommendation_cache",
    "telemetry_handler",
    "app_label",
)


def _open_telemetry_sink(logger: logging.Logger, log_dir: str, app_label: str) -> logging.Handler | None:
    logs_dir = Path(log_dir)
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Unable to create logs directory %s: %s", logs_dir, exc)
        return None
    handler = logging.FileHandler(logs_dir / f"{app_label}.log", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    logger.addHandler(handler)
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)
    return handler


async def _invoke_hook(hook: Hook | None, app: FastAPI) -> None:
    if hook is None:
        return
    try:
        result = hook(app)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logging.getLogger("nesthunt").exception("Application lifecycle hook failed")


def build_application_lifespan(
    app_label: str,
    *,
    startup_hook: Hook | None = None,
    shutdown_hook: Hook | None = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    base_logger = logging.getLogger("nesthunt")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        logger = base_logger.getChild(app_label)
        jurisdiction = settings.jurisdiction_config()
        telemetry_handler = None
        if settings.telemetry_enabled:
            telemetry_handler = _open_telemetry_sink(logger, settings.log_dir, app_label)

        app.state.settings = settings
        app.state.jurisdiction = jurisdiction
        app.state.recommendation_cache = RecommendationCache()
        app.state.telemetry_handler = telemetry_handler
        app.state.app_label = app_label

        logger.info(
            "Startup complete: jurisdiction=%s tax_year=%s telemetry=%s",
            jurisdiction.code,
            jurisdiction.tax_year,
            telemetry_handler is not None,
        )

        try:
            await _invoke_hook(startup_hook, app)
            yield
        finally:
            await _invoke_hook(shutdown_hook, app)
            logger.info("Shutdown complete")
            if telemetry_handler is not None:
                logger.removeHandler(telemetry_handler)
                telemetry_handler.close()
            for attr in _STATE_ATTRS:
                if hasattr(app.state, attr):
                    delattr(app.state, attr)

    return _lifespan
