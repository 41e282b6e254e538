"""
Tests for shooting_analysis.data.source and shooting_analysis.config.

The network is never touched: requests.get is replaced via monkeypatch.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import requests
import yaml

from shooting_analysis.config import load_config
from shooting_analysis.data import source
from shooting_analysis.data.source import fetch_rows, load_rows, read_rows
from shooting_analysis.errors import FetchError

_CSV = "INCIDENT_KEY,OCCUR_DATE,OCCUR_TIME,BORO,PERP_SEX\n1,01/02/2020,10:00:00,BRONX,\n2,,,QUEENS,M\n"


class _FakeResponse:
    def __init__(self, text: str, status: int = 200) -> None:
        self.text = text
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


def _patch_get(monkeypatch: pytest.MonkeyPatch, result=None, exc: Exception | None = None) -> list:
    calls: list = []

    def fake_get(url, timeout=None, **kwargs):
        calls.append((url, timeout))
        if exc is not None:
            raise exc
        return result

    monkeypatch.setattr(source.requests, "get", fake_get)
    return calls


class TestReadRows:
    def test_values_stay_strings(self, tmp_path: Path) -> None:
        p = tmp_path / "incidents.csv"
        p.write_text(_CSV, encoding="utf-8")
        df = read_rows(p)
        assert df.loc[0, "INCIDENT_KEY"] == "1"
        assert df.loc[0, "PERP_SEX"] == ""
        assert df.loc[1, "OCCUR_DATE"] == ""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_rows(tmp_path / "nope.csv")


class TestFetchRows:
    def test_success(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = _patch_get(monkeypatch, result=_FakeResponse(_CSV))
        df = fetch_rows("https://example.test/rows.csv", timeout=5)
        assert len(df) == 2
        assert df.loc[1, "BORO"] == "QUEENS"
        assert calls == [("https://example.test/rows.csv", 5)]

    def test_timeout_becomes_fetch_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_get(monkeypatch, exc=requests.Timeout("slow"))
        with pytest.raises(FetchError) as info:
            fetch_rows("https://example.test/rows.csv", timeout=1)
        assert info.value.stage == "fetch"
        assert "timed out" in str(info.value)

    def test_connection_error_becomes_fetch_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_get(monkeypatch, exc=requests.ConnectionError("refused"))
        with pytest.raises(FetchError):
            fetch_rows("https://example.test/rows.csv")

    def test_http_error_status(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_get(monkeypatch, result=_FakeResponse("oops", status=503))
        with pytest.raises(FetchError):
            fetch_rows("https://example.test/rows.csv")

    def test_empty_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_get(monkeypatch, result=_FakeResponse(""))
        with pytest.raises(FetchError):
            fetch_rows("https://example.test/rows.csv")

    def test_body_without_required_columns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_get(monkeypatch, result=_FakeResponse("<html>\nmaintenance\n"))
        with pytest.raises(FetchError) as info:
            fetch_rows("https://example.test/rows.csv")
        assert "missing required columns" in str(info.value)


class TestLoadRows:
    def test_url_is_fetched(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = _patch_get(monkeypatch, result=_FakeResponse(_CSV))
        load_rows("http://example.test/rows.csv", timeout=3)
        assert calls == [("http://example.test/rows.csv", 3)]

    def test_path_is_read(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = _patch_get(monkeypatch, result=_FakeResponse(_CSV))
        p = tmp_path / "incidents.csv"
        p.write_text(_CSV, encoding="utf-8")
        assert len(load_rows(p)) == 2
        assert calls == []


class TestLoadConfig:
    def test_pipeline_config_has_sections(self) -> None:
        cfg = load_config("pipeline")
        for section in ("source", "cleaning", "reporting", "output"):
            assert section in cfg
        assert cfg["cleaning"]["required_fields"] == ["BORO", "OCCUR_DATE"]

    def test_training_config_split(self) -> None:
        cfg = load_config("model_training")
        assert cfg["split"]["train_fraction"] == 0.7
        assert isinstance(cfg["split"]["seed"], int)

    def test_unknown_config_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist")

    def test_directory_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pipeline.yaml").write_text(yaml.safe_dump({"source": {"url": "x"}}), encoding="utf-8")
        monkeypatch.setenv("SHOOTING_ANALYSIS_CONFIG_DIR", str(tmp_path))
        assert load_config("pipeline") == {"source": {"url": "x"}}
