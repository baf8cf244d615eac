"""SRT subtitle generation from normalized sentences.

WHY: Premiere Pro imports SRT as a caption track. The sentence list from
the normalizer maps one-to-one onto SRT blocks, so no re-segmentation is
needed, only time shifting, optional punctuation removal, and exact
block formatting.

HOW: generate_srt() walks the sentences with a 1-based index and emits
``index / start --> end / text / blank`` for each. SRTFormatter wraps it
in the BaseFormatter interface used by the pipeline.

RULES:
- Empty input produces "" (no header, no trailing newline)
- Every block ends with exactly one blank line
- Times are sentence milliseconds / 1000 + offset seconds
- Punctuation removal only touches the fixed PUNCTUATION set
- Never modifies the input sentences
"""

from __future__ import annotations

import re
from typing import List

from pr_autosub.core.ir import Sentence
from pr_autosub.formatters.base import BaseFormatter, FormatterOutput
from pr_autosub.formatters.timecode import format_time

PUNCTUATION = ".,/#!$%^&*;:{}=-_`~()？。，、；：‘’“”《》【】"
"""Common ASCII and CJK punctuation stripped when removal is enabled."""

PUNCTUATION_RE = re.compile("[{}]".format(re.escape(PUNCTUATION)))


def strip_punctuation(text: str) -> str:
    """Remove every PUNCTUATION character from text.

    >>> strip_punctuation("Hello, world!")
    'Hello world'
    """
    return PUNCTUATION_RE.sub("", text)


def generate_srt(
    sentences: List[Sentence],
    offset_seconds: float = 0.0,
    remove_punctuation: bool = False,
) -> str:
    """Build a complete SRT payload.

    Args:
        sentences: Normalized sentences in display order.
        offset_seconds: Added to every start and end time.
        remove_punctuation: Strip PUNCTUATION from each caption's text.

    Returns:
        The SRT file content, or "" when there are no sentences.
    """
    blocks = []
    for index, sentence in enumerate(sentences, 1):
        start = sentence.start_ms / 1000 + offset_seconds
        end = sentence.end_ms / 1000 + offset_seconds
        text = strip_punctuation(sentence.text) if remove_punctuation else sentence.text
        blocks.append(
            "{}\n{} --> {}\n{}\n\n".format(index, format_time(start), format_time(end), text)
        )
    return "".join(blocks)


class SRTFormatter(BaseFormatter):
    """Formatter producing a single SRT caption file.

    RULES:
    - Returns a 1-element list with suffix ".srt"
    """

    def __init__(self, offset_seconds: float = 0.0, remove_punctuation: bool = False) -> None:
        self.offset_seconds = offset_seconds
        self.remove_punctuation = remove_punctuation

    @property
    def name(self) -> str:
        return "SRT Captions"

    def format(self, sentences: List[Sentence]) -> List[FormatterOutput]:
        content = generate_srt(sentences, self.offset_seconds, self.remove_punctuation)
        return [FormatterOutput(suffix=".srt", content=content)]
