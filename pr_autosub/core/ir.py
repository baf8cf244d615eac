"""Intermediate representation for recognition results and job state.

WHY: The ASR service answers in several shapes (a structured sentence
array, a timestamped text blob, occasionally JSON inside that text) and
its status endpoint mixes progress and result data. The rest of the
pipeline should not sniff shapes. These types are decoded once at the
service boundary and consumed everywhere else.

HOW: Small frozen dataclasses form three tagged unions:
  SentenceSource — StructuredResult | TextResult (what a finished job returned)
  JobStatus      — Pending | Succeeded | Failed (one status check)
  Sentence       — the canonical caption unit produced by the normalizer

RULES:
- Sentence times are milliseconds; 0 <= start_ms <= end_ms
- Sentence order is the order the service returned; never re-sorted
- A SentenceSource is either structured or text, never both
- JobHandle.task_id is opaque and only valid while the remote job exists
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Sentence:
    """One timestamped caption unit.

    RULES:
    - start_ms: non-negative milliseconds from the start of the audio
    - end_ms: milliseconds, never before start_ms
    - text: caption text exactly as recognized
    """

    start_ms: float
    end_ms: float
    text: str


@dataclass(frozen=True)
class StructuredResult:
    """Sentence-level result detail (one dict per sentence).

    Each item is expected to carry StartMs, EndMs and FinalSentence.
    """

    items: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class TextResult:
    """Opaque result text, usually "[m:s.fff,m:s.fff]  text" lines."""

    text: str = ""


SentenceSource = Union[StructuredResult, TextResult]


@dataclass(frozen=True)
class JobHandle:
    task_id: str


@dataclass(frozen=True)
class Pending:
    status: str = "waiting"


@dataclass(frozen=True)
class Succeeded:
    source: SentenceSource


@dataclass(frozen=True)
class Failed:
    reason: str


JobStatus = Union[Pending, Succeeded, Failed]


@dataclass(frozen=True)
class RecognitionOptions:
    """Options sent with the recognition job.

    WHY: The job request carries a handful of fixed fields plus the
    user-tunable engine model, hotword list and number conversion mode.

    RULES:
    - channel_num is always 1 (the export preset is mono)
    - res_text_format 3 requests sentence-level timestamps (ResultDetail)
    - source_type 0 means the audio is fetched from a URL
    """

    engine_model_type: str
    hotword_id: str | None = None
    convert_num_mode: int = 1
    channel_num: int = 1
    res_text_format: int = 3
    source_type: int = 0
