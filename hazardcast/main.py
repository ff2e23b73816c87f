"""HazardCast — main entry point.

This is the only file that knows about concrete implementations.
It wires together the core engine, the report source, and the API layer.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TextIO

import structlog
from fastapi import FastAPI

from hazardcast.api.monitoring import router as monitoring_router
from hazardcast.api.predictions import router as predictions_router
from hazardcast.config import AppConfig, load_config
from hazardcast.core.stats import PredictionStats
from hazardcast.storage.base import ReportSource
from hazardcast.storage.file_storage import FileReportSource

log = structlog.get_logger()

# Module-level singletons (set during startup)
_source: ReportSource | None = None
_stats: PredictionStats | None = None
_config: AppConfig | None = None


def get_source() -> ReportSource:
    assert _source is not None, "Service not initialized"
    return _source


def get_stats() -> PredictionStats:
    assert _stats is not None, "Service not initialized"
    return _stats


def get_config() -> AppConfig:
    assert _config is not None, "Service not initialized"
    return _config


def _setup_logging(config: AppConfig) -> TextIO | None:
    """Configure structlog based on the logging config.

    Returns the opened log file, if any, so the caller can close it.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    log_file = None
    logger_factory = structlog.PrintLoggerFactory()
    if config.logging.file:
        log_file = open(config.logging.file, "a")
        logger_factory = structlog.WriteLoggerFactory(file=log_file)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
        logger_factory=logger_factory,
    )
    return log_file


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    global _source, _stats, _config

    _config = load_config()
    log_file = _setup_logging(_config)

    log.info("service_starting",
             env=_config.server.env,
             data_dir=_config.storage.base_dir,
             days_to_analyze=_config.prediction.days_to_analyze,
             timezone=_config.prediction.timezone)

    _stats = PredictionStats()
    _source = FileReportSource(base_dir=_config.storage.base_dir)

    log.info("service_started",
             host=_config.server.host,
             port=_config.server.port)

    yield

    log.info("service_stopped")
    if log_file is not None:
        structlog.configure(logger_factory=structlog.PrintLoggerFactory())
        log_file.close()


app = FastAPI(
    title="HazardCast",
    description="Crowding and risk prediction for hazard reports",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(predictions_router)
app.include_router(monitoring_router)
