"""Tests for service startup and shutdown wiring."""

from __future__ import annotations

import pytest
import structlog

import hazardcast.main as main_module
from hazardcast.config import AppConfig


@pytest.fixture
def file_logging_config(tmp_path, data_dir):
    config = AppConfig()
    config.storage.base_dir = str(data_dir)
    config.logging.format = "json"
    config.logging.file = str(tmp_path / "hazardcast.log")
    yield config
    structlog.reset_defaults()


def test_setup_logging_without_file_returns_none():
    config = AppConfig()
    try:
        assert main_module._setup_logging(config) is None
    finally:
        structlog.reset_defaults()


def test_setup_logging_opens_log_file(file_logging_config):
    log_file = main_module._setup_logging(file_logging_config)
    try:
        assert log_file is not None
        assert not log_file.closed
    finally:
        log_file.close()


@pytest.mark.asyncio
async def test_lifespan_closes_log_file(file_logging_config, monkeypatch):
    opened = []
    setup_logging = main_module._setup_logging

    def _tracking_setup(config):
        log_file = setup_logging(config)
        opened.append(log_file)
        return log_file

    monkeypatch.setattr(main_module, "load_config", lambda: file_logging_config)
    monkeypatch.setattr(main_module, "_setup_logging", _tracking_setup)

    async with main_module.lifespan(main_module.app):
        assert main_module.get_config() is file_logging_config
        assert not opened[0].closed

    assert opened[0].closed
    with open(file_logging_config.logging.file) as f:
        events = f.read()
    assert "service_started" in events
    assert "service_stopped" in events
