"""Caption formatter registry.

WHY: The pipeline and CLI look formatters up by key. A central dict keeps
adding a caption format to one import and one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate with their options:
``formatter = FORMATTERS["srt"](remove_punctuation=True)``.

RULES:
- Keys are snake_case identifiers
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pr_autosub.formatters.srt import SRTFormatter, generate_srt, strip_punctuation
from pr_autosub.formatters.timecode import format_time

if TYPE_CHECKING:
    from pr_autosub.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SRTFormatter,
}

__all__ = ["FORMATTERS", "SRTFormatter", "format_time", "generate_srt", "strip_punctuation"]
