"""Configuration constants, pipeline settings, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Cloud credentials, bucket/region addressing, and
recognition options are supplied once per run as an explicit
PipelineConfig value, so the pipeline never reads ambient state.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values. load_pipeline_config() builds a frozen
PipelineConfig from the environment and raises a clear error when a
required value is missing.

RULES:
- Secrets are loaded from .env via python-dotenv, never hardcoded
- PipelineConfig is immutable; overrides go through dataclasses.replace()
- All defaults can be overridden via environment variables
- Credentials never show the secret key in repr()
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Remote service defaults
# ---------------------------------------------------------------------------

ASR_ENDPOINT = os.getenv("ASR_ENDPOINT", "asr.tencentcloudapi.com")

DEFAULT_ENGINE_MODEL = os.getenv("ASR_ENGINE_MODEL", "16k_zh")
DEFAULT_CONVERT_NUM_MODE = 1
DEFAULT_REMOVE_PUNCTUATION = os.getenv("REMOVE_PUNCTUATION", "false").lower() == "true"

CONVERT_NUM_MODES: set[int] = {0, 1, 3}
"""0 = no conversion, 1 = smart conversion, 3 = convert math digits."""

# ---------------------------------------------------------------------------
# Pipeline constants
# ---------------------------------------------------------------------------

POLL_INTERVAL_S = 2.0
POLL_MAX_ATTEMPTS = 150  # ~5 minutes at 2s
SIGNED_URL_EXPIRES_S = 3600
STORAGE_KEY_PREFIX = "pr-plugin/"
DEFAULT_PROJECT_NAME = "Project"

DEFAULT_EXPORT_PRESET = os.getenv("EXPORT_PRESET_PATH", "mp3.epr")
DEFAULT_WORK_DIR = os.getenv(
    "PR_AUTOSUB_WORK_DIR",
    os.path.join(tempfile.gettempdir(), "pr-auto-subtitles-temp"),
)
DEFAULT_BRIDGE_URL = os.getenv("BRIDGE_URL", "http://127.0.0.1:8765/eval")


@dataclass(frozen=True)
class Credentials:
    """Cloud API identity and secret.

    The secret key is excluded from repr so configs can be logged safely.
    """

    secret_id: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class PipelineConfig:
    """Everything one pipeline run needs, supplied once by the caller.

    WHY: Passing one immutable value into the pipeline makes each run
    reproducible and testable without touching the environment.

    HOW: Built by load_pipeline_config() or directly in tests. The CLI
    applies flag overrides with dataclasses.replace().

    RULES:
    - credentials, storage_bucket and storage_region are required
    - hotword_set_id is optional (None = no hotword list)
    - number_conversion_mode is one of CONVERT_NUM_MODES
    - export_preset and work_dir are local paths
    """

    credentials: Credentials
    storage_bucket: str
    storage_region: str
    recognition_engine_model: str = DEFAULT_ENGINE_MODEL
    hotword_set_id: str | None = None
    number_conversion_mode: int = DEFAULT_CONVERT_NUM_MODE
    remove_punctuation: bool = DEFAULT_REMOVE_PUNCTUATION
    export_preset: Path = Path(DEFAULT_EXPORT_PRESET)
    work_dir: Path = Path(DEFAULT_WORK_DIR)

    def __post_init__(self) -> None:
        if self.number_conversion_mode not in CONVERT_NUM_MODES:
            raise ValueError(
                "Invalid number conversion mode {!r}. Expected one of: {}".format(
                    self.number_conversion_mode,
                    ", ".join(str(m) for m in sorted(CONVERT_NUM_MODES)),
                )
            )


def load_pipeline_config(
    bucket: str | None = None,
    region: str | None = None,
) -> PipelineConfig:
    """Build a PipelineConfig from the environment.

    WHY: Credentials and storage addressing are required for every run.
    Loading them from the environment (via .env) keeps them out of source.

    HOW: Reads the TENCENT_* / COS_* / ASR_* variables populated by
    python-dotenv and falls back to module defaults for the rest.

    RULES:
    - Explicit bucket/region arguments win over the environment
    - Raises ValueError listing every missing required variable
    - Never returns placeholder credentials
    """
    required = {
        "TENCENT_SECRET_ID": os.getenv("TENCENT_SECRET_ID", "").strip(),
        "TENCENT_SECRET_KEY": os.getenv("TENCENT_SECRET_KEY", "").strip(),
        "COS_BUCKET": (bucket or os.getenv("COS_BUCKET", "")).strip(),
        "COS_REGION": (region or os.getenv("COS_REGION", "")).strip(),
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ValueError(
            "Missing configuration: {}. "
            "Add them to the .env file in the app folder.".format(", ".join(missing))
        )

    hotword_id = os.getenv("ASR_HOTWORD_ID", "").strip() or None
    raw_mode = os.getenv("ASR_CONVERT_NUM_MODE", str(DEFAULT_CONVERT_NUM_MODE)).strip()
    try:
        convert_num_mode = int(raw_mode)
    except ValueError:
        raise ValueError("ASR_CONVERT_NUM_MODE must be an integer, got {!r}".format(raw_mode))

    return PipelineConfig(
        credentials=Credentials(
            secret_id=required["TENCENT_SECRET_ID"],
            secret_key=required["TENCENT_SECRET_KEY"],
        ),
        storage_bucket=required["COS_BUCKET"],
        storage_region=required["COS_REGION"],
        recognition_engine_model=os.getenv("ASR_ENGINE_MODEL", DEFAULT_ENGINE_MODEL),
        hotword_set_id=hotword_id,
        number_conversion_mode=convert_num_mode,
        remove_punctuation=os.getenv("REMOVE_PUNCTUATION", str(DEFAULT_REMOVE_PUNCTUATION)).lower() == "true",
        export_preset=Path(os.getenv("EXPORT_PRESET_PATH", DEFAULT_EXPORT_PRESET)),
        work_dir=Path(os.getenv("PR_AUTOSUB_WORK_DIR", DEFAULT_WORK_DIR)),
    )
