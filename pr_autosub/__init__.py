"""Premiere Pro auto-subtitles — sequence audio to imported SRT captions.

WHY: Captioning a sequence by hand is slow. The editor can export the
sequence audio and import an SRT file, and a cloud ASR service can turn
audio into timestamped sentences. This package wires those together so a
single command produces captions inside the open project.

HOW: One sequential pipeline — export (editor bridge), upload (object
storage), recognize (ASR job + polling), transcode (normalize the result
and generate SRT), persist, import (editor bridge), cleanup. Each stage
lives in its own module and is independently testable.

RULES:
- The orchestrator is the only module that calls the other components
- Remote services and the editor are reached through small adapters
- The Sentence list is the stable contract between recognition and formatting
"""

__version__ = "0.1.0"
