"""Tests for environment-driven configuration."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from pr_autosub.config import Credentials, PipelineConfig, load_pipeline_config

_ENV_VARS = (
    "TENCENT_SECRET_ID",
    "TENCENT_SECRET_KEY",
    "COS_BUCKET",
    "COS_REGION",
    "ASR_ENGINE_MODEL",
    "ASR_HOTWORD_ID",
    "ASR_CONVERT_NUM_MODE",
    "REMOVE_PUNCTUATION",
    "EXPORT_PRESET_PATH",
    "PR_AUTOSUB_WORK_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    clean_env.setenv("TENCENT_SECRET_ID", "AKIDexample")
    clean_env.setenv("TENCENT_SECRET_KEY", "topsecret")
    clean_env.setenv("COS_BUCKET", "subs-1250000000")
    clean_env.setenv("COS_REGION", "ap-shanghai")
    return clean_env


class TestLoadPipelineConfig:

    def test_required_values(self, full_env):
        config = load_pipeline_config()
        assert config.credentials == Credentials("AKIDexample", "topsecret")
        assert config.storage_bucket == "subs-1250000000"
        assert config.storage_region == "ap-shanghai"

    def test_defaults(self, full_env):
        config = load_pipeline_config()
        assert config.recognition_engine_model == "16k_zh"
        assert config.hotword_set_id is None
        assert config.number_conversion_mode == 1
        assert config.remove_punctuation is False

    def test_optional_values(self, full_env, tmp_path):
        full_env.setenv("ASR_ENGINE_MODEL", "16k_en")
        full_env.setenv("ASR_HOTWORD_ID", "hw-123")
        full_env.setenv("ASR_CONVERT_NUM_MODE", "3")
        full_env.setenv("REMOVE_PUNCTUATION", "TRUE")
        full_env.setenv("EXPORT_PRESET_PATH", str(tmp_path / "a.epr"))
        full_env.setenv("PR_AUTOSUB_WORK_DIR", str(tmp_path / "w"))
        config = load_pipeline_config()
        assert config.recognition_engine_model == "16k_en"
        assert config.hotword_set_id == "hw-123"
        assert config.number_conversion_mode == 3
        assert config.remove_punctuation is True
        assert config.export_preset == tmp_path / "a.epr"
        assert config.work_dir == tmp_path / "w"

    def test_blank_hotword_is_none(self, full_env):
        full_env.setenv("ASR_HOTWORD_ID", "   ")
        assert load_pipeline_config().hotword_set_id is None

    def test_arguments_override_environment(self, full_env):
        config = load_pipeline_config(bucket="other-1250000000", region="ap-beijing")
        assert config.storage_bucket == "other-1250000000"
        assert config.storage_region == "ap-beijing"

    def test_missing_values_listed(self, clean_env):
        clean_env.setenv("TENCENT_SECRET_ID", "AKIDexample")
        with pytest.raises(ValueError) as exc_info:
            load_pipeline_config()
        message = str(exc_info.value)
        assert "TENCENT_SECRET_KEY" in message
        assert "COS_BUCKET" in message
        assert "COS_REGION" in message
        assert "TENCENT_SECRET_ID" not in message

    def test_missing_region_satisfied_by_argument(self, full_env):
        full_env.delenv("COS_REGION")
        assert load_pipeline_config(region="ap-chengdu").storage_region == "ap-chengdu"

    def test_invalid_convert_mode(self, full_env):
        full_env.setenv("ASR_CONVERT_NUM_MODE", "2")
        with pytest.raises(ValueError, match="number conversion mode"):
            load_pipeline_config()

    def test_non_integer_convert_mode(self, full_env):
        full_env.setenv("ASR_CONVERT_NUM_MODE", "smart")
        with pytest.raises(ValueError, match="ASR_CONVERT_NUM_MODE"):
            load_pipeline_config()


class TestPipelineConfig:

    def test_secret_hidden_from_repr(self):
        config = PipelineConfig(Credentials("AKIDexample", "topsecret"), "b-1", "ap-guangzhou")
        assert "topsecret" not in repr(config)
        assert "AKIDexample" in repr(config)

    def test_frozen(self):
        config = PipelineConfig(Credentials("id", "key"), "b-1", "ap-guangzhou")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.storage_bucket = "other"

    def test_replace_revalidates(self):
        config = PipelineConfig(Credentials("id", "key"), "b-1", "ap-guangzhou")
        with pytest.raises(ValueError):
            dataclasses.replace(config, number_conversion_mode=7)

    def test_paths(self):
        config = PipelineConfig(Credentials("id", "key"), "b-1", "ap-guangzhou")
        assert isinstance(config.export_preset, Path)
        assert isinstance(config.work_dir, Path)
