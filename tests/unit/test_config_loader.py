from __future__ import annotations

from pathlib import Path

import pytest

from packtrack.config.loader import ConfigError, load_config
from packtrack.models.config_models import DEFAULT_DATE_PATTERN, TrackerConfig


def _write(temp_workdir: Path, text: str, name: str = "packtrack.yml") -> Path:
    path = temp_workdir / "config" / name
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_when_default_file_missing(temp_workdir: Path):
    cfg = load_config(None, env={})
    assert cfg == TrackerConfig()
    assert cfg.header_rules.markers == ("postage", "payment proof")
    assert cfg.header_rules.date_pattern == DEFAULT_DATE_PATTERN


def test_default_file_is_picked_up(temp_workdir: Path):
    _write(temp_workdir, "state_directory: ./state\nmax_workers: 2\n")
    cfg = load_config(None, env={})
    assert cfg.state_directory == "./state"
    assert cfg.max_workers == 2
    assert cfg.export_directory == "exports"


def test_explicit_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_config(temp_workdir / "config" / "nope.yml", env={})
    assert "config file not found" in str(e.value)


def test_markers_are_lower_cased(temp_workdir: Path):
    path = _write(temp_workdir, "header_markers: [Shipping, 'Proof Of Payment']\n")
    cfg = load_config(path, env={})
    assert cfg.header_rules.markers == ("shipping", "proof of payment")


def test_extra_field_is_rejected(temp_workdir: Path):
    path = _write(temp_workdir, "extra_field: 1\n")
    with pytest.raises(ConfigError) as e:
        load_config(path, env={})
    assert "config validation failed" in str(e.value)


def test_wrong_type_is_rejected(temp_workdir: Path):
    path = _write(temp_workdir, "max_workers: many\n")
    with pytest.raises(ConfigError) as e:
        load_config(path, env={})
    assert "config validation failed" in str(e.value)


def test_invalid_yaml(temp_workdir: Path):
    path = _write(temp_workdir, "state_directory: [unclosed\n")
    with pytest.raises(ConfigError) as e:
        load_config(path, env={})
    assert "invalid yaml" in str(e.value)


def test_non_mapping_root(temp_workdir: Path):
    path = _write(temp_workdir, "- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_invalid_date_pattern(temp_workdir: Path):
    path = _write(temp_workdir, "date_pattern: '([0-9'\n")
    with pytest.raises(ConfigError) as e:
        load_config(path, env={})
    assert "invalid date_pattern" in str(e.value)


def test_unknown_encoding(temp_workdir: Path):
    path = _write(temp_workdir, "encoding: no-such-codec\n")
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_environment_overrides_yaml(temp_workdir: Path):
    path = _write(temp_workdir, "state_directory: ./from_yaml\nexport_directory: ./exp\n")
    cfg = load_config(path, env={"PACKTRACK_STATE_DIR": "./from_env", "PACKTRACK_LOGS_DIR": ""})
    assert cfg.state_directory == "./from_env"
    assert cfg.export_directory == "./exp"
    assert cfg.logs_directory == "logs"
