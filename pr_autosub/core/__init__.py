"""Core result types, normalization, and job polling.

WHY: The core package holds the pieces with real logic that do not touch
the editor or the disk: the IR types, the result normalizer, and the
polling state machine for remote recognition jobs.

HOW: ir.py defines the data structures, normalizer.py turns recognition
results into Sentence lists, poller.py submits a job and waits for it.

RULES:
- IR dataclasses are the contract between modules; change with care
- Nothing in core performs file or editor I/O
"""
