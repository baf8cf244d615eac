"""Abstract base formatter and output container.

WHY: The pipeline writes whatever a formatter produces without knowing
the caption format. This base class keeps that seam explicit so a new
caption format is one new module.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. FormatterOutput bundles a file suffix with its
text content.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; caption formatters return one item
- ``suffix`` is appended to the sanitized project name, e.g. ``".srt"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from pr_autosub.core.ir import Sentence


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the project name, e.g. ``".srt"``.
        content: The file content (written as UTF-8).
    """

    suffix: str
    content: str


class BaseFormatter(ABC):
    """Abstract base for caption formatters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Captions'."""

    @abstractmethod
    def format(self, sentences: List[Sentence]) -> List[FormatterOutput]:
        """Convert a sentence list into one or more output files."""
