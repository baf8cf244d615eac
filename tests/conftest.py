"""Shared test fixtures for the pr_autosub test suite.

WHY: The normalizer, api, poller and pipeline tests all need the same
recognition payloads and the same run configuration. Centralizing them
keeps every test on the same sample data.

HOW: Pytest fixtures provide a sample ResultDetail array, the matching
timestamped text result, a succeeded status built from it, and a
PipelineConfig rooted in tmp_path. Fake collaborators live in
tests/fakes.py.

RULES:
- No fixture touches the network
"""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from pr_autosub.config import Credentials, PipelineConfig
from pr_autosub.core.ir import StructuredResult, Succeeded


# ---------------------------------------------------------------------------
# Sample recognition payloads
# ---------------------------------------------------------------------------

RESULT_DETAIL: List[Dict[str, Any]] = [
    {"FinalSentence": "大家好，欢迎收看。", "SliceSentence": "大家 好 欢迎 收看", "StartMs": 0,    "EndMs": 1820, "WordsNum": 4},
    {"FinalSentence": "今天我们聊聊剪辑。", "SliceSentence": "今天 我们 聊聊 剪辑", "StartMs": 2100, "EndMs": 4350, "WordsNum": 4},
]

RESULT_TEXT = (
    "[0:0.000,0:1.820]  大家好，欢迎收看。\n"
    "[0:2.100,0:4.350]  今天我们聊聊剪辑。\n"
)


@pytest.fixture
def result_detail():
    return [dict(item) for item in RESULT_DETAIL]


@pytest.fixture
def result_text():
    return RESULT_TEXT


@pytest.fixture
def succeeded_structured(result_detail):
    return Succeeded(StructuredResult(result_detail))


@pytest.fixture
def pipeline_config(tmp_path):
    """PipelineConfig with an existing export preset and a tmp work dir."""
    preset = tmp_path / "mp3.epr"
    preset.write_text("<preset/>", encoding="utf-8")
    return PipelineConfig(
        credentials=Credentials(secret_id="AKIDtest", secret_key="secret"),
        storage_bucket="subs-1250000000",
        storage_region="ap-guangzhou",
        recognition_engine_model="16k_zh",
        hotword_set_id=None,
        number_conversion_mode=1,
        remove_punctuation=False,
        export_preset=preset,
        work_dir=tmp_path / "work",
    )
