"""Tests for the command-line entry point.

HOW: load_pipeline_config and pipeline.run are patched so main() runs
without credentials, an editor or the network. Exit codes and the
stdout/stderr split are asserted through capsys.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from pr_autosub.cli import build_config, build_parser, main
from pr_autosub.errors import ExportError
from pr_autosub.pipeline import PipelineResult


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.bridge_url == "http://127.0.0.1:8765/eval"
        assert args.convert_num_mode is None
        assert args.remove_punctuation is None
        assert args.verbose is False

    def test_remove_punctuation_flags(self):
        parser = build_parser()
        assert parser.parse_args(["--remove-punctuation"]).remove_punctuation is True
        assert parser.parse_args(["--no-remove-punctuation"]).remove_punctuation is False

    def test_convert_num_mode_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--convert-num-mode", "2"])


class TestBuildConfig:

    def test_overrides(self, pipeline_config, tmp_path):
        args = build_parser().parse_args([
            "--engine-model", "16k_en",
            "--hotword-id", "hw-9",
            "--convert-num-mode", "0",
            "--remove-punctuation",
            "--preset", str(tmp_path / "other.epr"),
            "--work-dir", str(tmp_path / "out"),
        ])
        with patch("pr_autosub.cli.load_pipeline_config", return_value=pipeline_config):
            config = build_config(args)
        assert config.recognition_engine_model == "16k_en"
        assert config.hotword_set_id == "hw-9"
        assert config.number_conversion_mode == 0
        assert config.remove_punctuation is True
        assert config.export_preset == tmp_path / "other.epr"
        assert config.work_dir == tmp_path / "out"
        assert config.credentials == pipeline_config.credentials

    def test_no_overrides_keeps_config(self, pipeline_config):
        args = build_parser().parse_args([])
        with patch("pr_autosub.cli.load_pipeline_config", return_value=pipeline_config):
            assert build_config(args) is pipeline_config

    def test_bucket_and_region_passed_through(self, pipeline_config):
        args = build_parser().parse_args(["--bucket", "b-2", "--region", "ap-beijing"])
        with patch("pr_autosub.cli.load_pipeline_config", return_value=pipeline_config) as loader:
            build_config(args)
        loader.assert_called_once_with(bucket="b-2", region="ap-beijing")


class TestMain:

    def test_success(self, pipeline_config, capsys):
        result = PipelineResult(subtitle_path=Path("/work/My Project.srt"), sentence_count=12)
        with patch("pr_autosub.cli.load_pipeline_config", return_value=pipeline_config), \
                patch("pr_autosub.pipeline.run", new=AsyncMock(return_value=result)) as run:
            main([])
        captured = capsys.readouterr()
        assert captured.out.strip() == str(Path("/work/My Project.srt"))
        assert "Done! 12 caption(s) imported." in captured.err
        assert run.await_args.args[1] is pipeline_config

    def test_config_error_exits_1(self, capsys):
        with patch("pr_autosub.cli.load_pipeline_config", side_effect=ValueError("Missing configuration: COS_BUCKET")):
            with pytest.raises(SystemExit) as exc_info:
                main([])
        assert exc_info.value.code == 1
        assert "COS_BUCKET" in capsys.readouterr().err

    def test_pipeline_error_exits_1(self, pipeline_config, capsys):
        with patch("pr_autosub.cli.load_pipeline_config", return_value=pipeline_config), \
                patch("pr_autosub.pipeline.run", new=AsyncMock(side_effect=ExportError("No active sequence"))):
            with pytest.raises(SystemExit) as exc_info:
                main([])
        assert exc_info.value.code == 1
        assert "export failed: No active sequence" in capsys.readouterr().err

    def test_interrupt_exits_130(self, pipeline_config):
        with patch("pr_autosub.cli.load_pipeline_config", return_value=pipeline_config), \
                patch("pr_autosub.pipeline.run", new=AsyncMock(side_effect=KeyboardInterrupt)):
            with pytest.raises(SystemExit) as exc_info:
                main([])
        assert exc_info.value.code == 130
