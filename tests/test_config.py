"""Tests for configuration loading."""

from __future__ import annotations

import logging

import pytest

from gridmap.config import extraction_workers, lenient_booleans, load_config


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config()
        assert config["GRIDMAP_EXTRACTION_WORKERS"] == "4"
        assert config["GRIDMAP_LENIENT_BOOLEANS"] == "false"

    def test_overrides(self) -> None:
        config = load_config({"GRIDMAP_EXTRACTION_WORKERS": 8})
        assert config["GRIDMAP_EXTRACTION_WORKERS"] == "8"

    def test_env_wins_over_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRIDMAP_EXTRACTION_WORKERS", "16")
        config = load_config({"GRIDMAP_EXTRACTION_WORKERS": "8"})
        assert config["GRIDMAP_EXTRACTION_WORKERS"] == "16"


class TestSettings:
    def test_extraction_workers(self) -> None:
        assert extraction_workers(load_config({"GRIDMAP_EXTRACTION_WORKERS": "2"})) == 2

    def test_extraction_workers_at_least_one(self) -> None:
        assert extraction_workers(load_config({"GRIDMAP_EXTRACTION_WORKERS": "0"})) == 1

    def test_invalid_workers_fall_back(self, caplog: pytest.LogCaptureFixture) -> None:
        config = load_config({"GRIDMAP_EXTRACTION_WORKERS": "many"})
        with caplog.at_level(logging.WARNING):
            assert extraction_workers(config) == 4
        assert "Invalid GRIDMAP_EXTRACTION_WORKERS" in caplog.text

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("1", True),
        (" Yes ", True),
        ("false", False),
        ("", False),
    ])
    def test_lenient_booleans(self, raw: str, expected: bool) -> None:
        config = load_config({"GRIDMAP_LENIENT_BOOLEANS": raw})
        assert lenient_booleans(config) is expected

    def test_reads_environment_without_config(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GRIDMAP_LENIENT_BOOLEANS", "on")
        assert lenient_booleans() is True
