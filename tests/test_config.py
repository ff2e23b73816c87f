"""Tests for YAML + environment configuration loading."""

from __future__ import annotations

from datetime import timezone

from hazardcast.config import AppConfig, load_config


def test_defaults_when_file_missing(tmp_path):
    config = load_config(tmp_path / "missing.yaml")
    assert config == AppConfig()
    assert config.prediction.days_to_analyze == 30
    assert config.prediction.prediction_hours == 24
    assert config.prediction.cluster_radius_km == 0.5
    assert config.prediction.min_crowding_level == 20
    assert config.prediction.tz is timezone.utc


def test_yaml_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n"
        "  port: 9000\n"
        "storage:\n"
        "  base_dir: /srv/hazard\n"
        "prediction:\n"
        "  days_to_analyze: 14\n"
        "  query_radius_km: 2.5\n"
        "  unknown_key: ignored\n"
        "logging:\n"
        "  format: json\n"
    )
    config = load_config(path)
    assert config.server.port == 9000
    assert config.storage.base_dir == "/srv/hazard"
    assert config.prediction.days_to_analyze == 14
    assert config.prediction.query_radius_km == 2.5
    assert not hasattr(config.prediction, "unknown_key")
    assert config.logging.format == "json"


def test_empty_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == AppConfig()


def test_env_overrides_win(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("prediction:\n  days_to_analyze: 14\n")
    monkeypatch.setenv("HAZARD_PREDICTION_DAYS", "7")
    monkeypatch.setenv("HAZARD_PREDICTION_CLUSTER_RADIUS_KM", "0.25")
    monkeypatch.setenv("HAZARD_LOG_LEVEL", "debug")

    config = load_config(path)
    assert config.prediction.days_to_analyze == 7
    assert config.prediction.cluster_radius_km == 0.25
    assert config.logging.level == "debug"


def test_utc_timezone_name_is_case_insensitive():
    config = AppConfig()
    config.prediction.timezone = "utc"
    assert config.prediction.tz is timezone.utc
