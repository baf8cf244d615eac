"""Command-line interface for the auto-subtitle pipeline.

WHY: Editors trigger a run from the panel or a terminal on the editing
machine. The CLI loads configuration, applies flag overrides, points the
pipeline's log sink at stderr, and turns the terminal PipelineError into
an exit status.

HOW: Uses argparse for flags, python-dotenv (via config) for credentials,
and asyncio.run() for the async pipeline. The editor is reached through
an HttpScriptChannel at --bridge-url.

RULES:
- Status output goes to stderr (not stdout); the SRT path goes to stdout
- Configuration errors and pipeline failures exit with status 1
- Ctrl-C exits with status 130 after the pipeline's cleanup has run
- One run per invocation; there is no re-entry
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pr_autosub import pipeline
from pr_autosub.bridge import EditorBridge, HttpScriptChannel
from pr_autosub.config import (
    CONVERT_NUM_MODES,
    DEFAULT_BRIDGE_URL,
    PipelineConfig,
    load_pipeline_config,
)
from pr_autosub.errors import PipelineError


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Load the environment config and apply command-line overrides.

    RULES:
    - Flags left at None keep the environment value
    - Raises ValueError for missing credentials or invalid values
    """
    config = load_pipeline_config(bucket=args.bucket, region=args.region)

    overrides = {}
    if args.engine_model:
        overrides["recognition_engine_model"] = args.engine_model
    if args.hotword_id:
        overrides["hotword_set_id"] = args.hotword_id
    if args.convert_num_mode is not None:
        overrides["number_conversion_mode"] = args.convert_num_mode
    if args.remove_punctuation is not None:
        overrides["remove_punctuation"] = args.remove_punctuation
    if args.preset:
        overrides["export_preset"] = Path(args.preset)
    if args.work_dir:
        overrides["work_dir"] = Path(args.work_dir)

    return dataclasses.replace(config, **overrides) if overrides else config


async def _run_pipeline(args: argparse.Namespace, config: PipelineConfig) -> pipeline.PipelineResult:
    bridge = EditorBridge(HttpScriptChannel(args.bridge_url))
    return await pipeline.run(bridge, config, on_status=_status)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pr_autosub",
        description="Export the active sequence's audio, transcribe it with cloud ASR, "
                    "and import the result as SRT subtitles.",
    )

    parser.add_argument(
        "--bridge-url",
        default=DEFAULT_BRIDGE_URL,
        help="Editor panel endpoint that evaluates host scripts (default: %(default)s).",
    )

    parser.add_argument(
        "--preset",
        default=None,
        help="Path to the audio export preset (.epr). Overrides EXPORT_PRESET_PATH.",
    )

    parser.add_argument(
        "--work-dir",
        default=None,
        help="Directory for the temporary audio and the generated subtitle file.",
    )

    parser.add_argument("--bucket", default=None, help="Storage bucket. Overrides COS_BUCKET.")
    parser.add_argument("--region", default=None, help="Storage region. Overrides COS_REGION.")

    parser.add_argument(
        "--engine-model",
        default=None,
        help="Recognition engine model, e.g. 16k_zh or 16k_en. Overrides ASR_ENGINE_MODEL.",
    )

    parser.add_argument(
        "--hotword-id",
        default=None,
        help="Hotword list ID to bias recognition. Overrides ASR_HOTWORD_ID.",
    )

    parser.add_argument(
        "--convert-num-mode",
        type=int,
        choices=sorted(CONVERT_NUM_MODES),
        default=None,
        help="Number conversion mode: 0 none, 1 smart, 3 math digits.",
    )

    parser.add_argument(
        "--remove-punctuation",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Strip punctuation from caption text. Overrides REMOVE_PUNCTUATION.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    try:
        result = asyncio.run(_run_pipeline(args, config))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except PipelineError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("")
    _status("Done! {} caption(s) imported.".format(result.sentence_count))
    print(result.subtitle_path)


if __name__ == "__main__":
    main()
