"""Convert recognition results into a canonical sentence list.

WHY: A finished ASR job hands back either a structured sentence array or
a text blob. The text blob is normally one "[0:1.000,0:2.500]  hello"
line per sentence, but some engines put JSON there instead. Subtitle
generation needs one list of Sentence objects regardless.

HOW: normalize() dispatches on the SentenceSource variant:
  StructuredResult → map StartMs/EndMs/FinalSentence one-to-one
  TextResult       → parse timestamped lines; if none matched, try JSON
                     (a bare array, or an object with a "Sentences" field)

RULES:
- Never raises; anything unparseable degrades to an empty list
- Non-matching text lines are skipped silently
- Order is preserved exactly as received
- Times are clamped so 0 <= start_ms <= end_ms
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, List, Optional

from pr_autosub.core.ir import Sentence, SentenceSource, StructuredResult, TextResult

logger = logging.getLogger(__name__)

LINE_RE = re.compile(r"\[(\d+):(\d+\.\d+),(\d+):(\d+\.\d+)\]\s+(.*)")

# Key sets accepted for one sentence element, in priority order.
_FIELD_SETS = (
    ("StartMs", "EndMs", "FinalSentence"),
    ("StartTime", "EndTime", "Text"),
)


def normalize(source: SentenceSource) -> List[Sentence]:
    """Normalize any recognition result into a list of Sentence objects.

    Args:
        source: The decoded result of a succeeded recognition job.

    Returns:
        Sentences in service order. Empty when nothing could be extracted.
    """
    if isinstance(source, StructuredResult):
        return normalize_structured(source.items)
    if isinstance(source, TextResult):
        return normalize_text(source.text)
    logger.warning("Unknown recognition result type: %s", type(source).__name__)
    return []


def normalize_structured(items: Any) -> List[Sentence]:
    """Map structured sentence dicts to Sentence objects.

    RULES:
    - Accepts StartMs/EndMs/FinalSentence and StartTime/EndTime/Text keys
    - Elements without finite numeric times are dropped
    """
    if not isinstance(items, list):
        return []

    sentences: List[Sentence] = []
    for item in items:
        sentence = _sentence_from_item(item)
        if sentence is not None:
            sentences.append(sentence)
    return sentences


def normalize_text(text: str) -> List[Sentence]:
    """Parse timestamped result lines, falling back to JSON.

    WHY: With sentence-level timestamps requested, the text result holds
    lines like ``[1:02.500,1:05.120]  some words``. Minutes are not
    zero-padded and seconds always carry a fraction.

    HOW: Each line is matched against LINE_RE; ``minutes * 60 + seconds``
    becomes milliseconds for both bounds. Only when no line matched is the
    whole payload tried as JSON.

    RULES:
    - Lines that do not match are skipped
    - JSON arrays are treated as a sentence list
    - JSON objects are used through their "Sentences" field
    - Anything else yields []
    """
    if not text:
        return []

    sentences = parse_timestamped_lines(text)
    if sentences:
        return sentences

    return _parse_json_fallback(text)


def parse_timestamped_lines(text: str) -> List[Sentence]:
    sentences: List[Sentence] = []
    for line in text.splitlines():
        match = LINE_RE.search(line)
        if not match:
            continue
        start_min, start_sec, end_min, end_sec, body = match.groups()
        start_ms = _to_ms(int(start_min), float(start_sec))
        end_ms = _to_ms(int(end_min), float(end_sec))
        sentences.append(_make_sentence(start_ms, end_ms, body))
    return sentences


# ---------------------------------------------------------------------------
# Helpers (module-private)
# ---------------------------------------------------------------------------


def _to_ms(minutes: int, seconds: float) -> int:
    return int(round((minutes * 60 + seconds) * 1000))


def _make_sentence(start_ms: float, end_ms: float, text: str) -> Sentence:
    start_ms = max(0, start_ms)
    end_ms = max(start_ms, end_ms)
    return Sentence(start_ms=start_ms, end_ms=end_ms, text=text)


def _sentence_from_item(item: Any) -> Optional[Sentence]:
    if not isinstance(item, dict):
        return None

    for start_key, end_key, text_key in _FIELD_SETS:
        if start_key in item and end_key in item:
            start, end = item[start_key], item[end_key]
            if not _is_number(start) or not _is_number(end):
                return None
            text = item.get(text_key)
            return _make_sentence(start, end, "" if text is None else str(text))

    return None


def _is_number(value: Any) -> bool:
    # JSON admits Infinity, NaN and integers too large for a float
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _parse_json_fallback(text: str) -> List[Sentence]:
    try:
        parsed = json.loads(text)
    except ValueError:
        logger.debug("Result text is neither timestamped lines nor JSON")
        return []

    if isinstance(parsed, list):
        return normalize_structured(parsed)
    if isinstance(parsed, dict) and "Sentences" in parsed:
        return normalize_structured(parsed["Sentences"])
    return []
