import json
from pathlib import Path

import pytest

from media_exporter import config
from media_exporter.config import ExporterSettings, load_settings
from media_exporter.exceptions import SettingsError


def _settings_file(tmp_path, section):
    p = tmp_path / "appsettings.json"
    p.write_text(json.dumps({"Logging": {}, "MediaExporter": section}), encoding="utf-8")
    return p


def test_defaults():
    s = load_settings()
    assert s.export_root == config.DEFAULT_EXPORT_ROOT
    assert s.empty_folder_only is False
    assert s.run_once is False
    assert s.max_children is None
    assert s.page_size == config.DEFAULT_PAGE_SIZE


def test_file_overrides_defaults(tmp_path):
    p = _settings_file(tmp_path, {
        "ExportRootPath": str(tmp_path / "out"),
        "MediaRootPath": str(tmp_path / "www"),
        "ExportToEmptyFolderOnly": True,
        "ExportRunOnce": True,
        "MaxChildren": 500,
    })
    s = load_settings(p)
    assert s.export_root == tmp_path / "out"
    assert isinstance(s.media_root, Path)
    assert s.empty_folder_only is True
    assert s.run_once is True
    assert s.max_children == 500


def test_empty_export_root_keeps_literal_default(tmp_path):
    s = load_settings(_settings_file(tmp_path, {"ExportRootPath": ""}))
    assert s.export_root == config.DEFAULT_EXPORT_ROOT


def test_file_without_section_keeps_defaults(tmp_path):
    p = tmp_path / "appsettings.json"
    p.write_text('{"Logging": {}}', encoding="utf-8")
    assert load_settings(p) == ExporterSettings()


def test_overrides_win_and_none_is_ignored(tmp_path):
    p = _settings_file(tmp_path, {"ExportRootPath": "from-file", "ExportRunOnce": True})
    s = load_settings(p, export_root=tmp_path / "cli", run_once=None)
    assert s.export_root == tmp_path / "cli"
    assert s.run_once is True


@pytest.mark.parametrize("section", [
    {"MaxChildren": -1},
    {"PageSize": 0},
    {"PageSize": "many"},
    {"ExportToEmptyFolderOnly": "false"},
    {"ExportRunOnce": 1},
    [],
])
def test_invalid_values_raise(tmp_path, section):
    with pytest.raises(SettingsError):
        load_settings(_settings_file(tmp_path, section))


def test_unreadable_file_raises(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(bad)
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "absent.json")


def test_unknown_override_raises():
    with pytest.raises(SettingsError):
        load_settings(exportroot="x")


def test_non_bool_override_raises():
    with pytest.raises(SettingsError):
        load_settings(run_once="yes")
