"""Tests for facet view config persistence."""

from __future__ import annotations

import json

from nicefacets.facet_engine.facet_config import (
    SCHEMA_VERSION,
    FacetViewConfig,
    FacetViewConfigData,
)


def test_missing_file_uses_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    cfg = FacetViewConfig.load(config_path=path)
    assert cfg.data == FacetViewConfigData()
    assert not path.exists()


def test_create_if_missing_writes_defaults(tmp_path):
    path = tmp_path / "sub" / "cfg.json"
    FacetViewConfig.load(config_path=path, create_if_missing=True)
    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["schema_version"] == SCHEMA_VERSION
    assert on_disk["aggregate_bucket_count"] == 20
    assert on_disk["queue_capacity"] == 100


def test_save_and_reload_stats_mode(tmp_path):
    path = tmp_path / "cfg.json"
    cfg = FacetViewConfig.load(config_path=path)
    cfg.set_stats_mode(True)
    cfg.save()
    assert FacetViewConfig.load(config_path=path).get_stats_mode() is True


def test_invalid_json_uses_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{not json", encoding="utf-8")
    assert FacetViewConfig.load(config_path=path).data == FacetViewConfigData()


def test_non_dict_payload_uses_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert FacetViewConfig.load(config_path=path).data == FacetViewConfigData()


def test_schema_mismatch_resets(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"schema_version": 999, "panel_width_px": 500}), encoding="utf-8")
    assert FacetViewConfig.load(config_path=path).data.panel_width_px == 360


def test_from_json_dict_is_tolerant():
    data = FacetViewConfigData.from_json_dict({
        "schema_version": SCHEMA_VERSION,
        "aggregate_bucket_count": 1000,
        "drain_interval_s": 0,
        "panel_width_px": "wide",
        "text_size": "text-huge",
        "unknown_key": 1,
        "visible_rows": "8",
    })
    assert data.aggregate_bucket_count == 200
    assert data.drain_interval_s == 0.05
    assert data.panel_width_px == 360
    assert data.text_size == "text-sm"
    assert data.visible_rows == 8


def test_partial_dict_keeps_other_defaults():
    data = FacetViewConfigData.from_json_dict({"panel_bucket_count": 5})
    assert data.panel_bucket_count == 5
    assert data.aggregate_bucket_count == 20
