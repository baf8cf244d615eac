"""Pipeline orchestrator — sequence audio in, imported subtitles out.

WHY: Producing captions takes seven dependent steps across three systems
(the editor, object storage, the recognition service). Each step can fail
in its own way, and temporary artifacts must not leak whichever step
fails. This module is the single place that knows the order of the
steps and who cleans up what.

HOW: run() executes the stages strictly in sequence, each awaited before
the next begins:
  1. export: editor writes the sequence audio to a temp file
  2. upload: the file goes to object storage; a 1-hour signed URL is made
  3. recognize: a recognition job is submitted and polled (core.poller)
  4. transcode: the result is normalized and rendered as SRT
  5. persist: the SRT is written as <project name>.srt
  6. import: the editor imports the SRT into the project
  7. cleanup: always deletes the temp audio and the storage object
Every stage failure is wrapped in its PipelineError subclass and re-raised
after cleanup. Storage and recognition clients are created from the config
unless the caller injects them.

RULES:
- One run at a time; callers prevent re-entry
- Stage failures are never retried (only per-attempt status checks are)
- Cleanup runs for every outcome and each deletion is attempted at most once
- Cleanup failures are logged and swallowed
- An empty recognition result is a warning, not an error
- The subtitle offset is always zero; the sequence in-point is ignored
- The optional cancel_event is checked before every stage
"""

from __future__ import annotations

import asyncio
import logging
import re
import uuid
from collections.abc import Awaitable, Callable
from contextlib import AsyncExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from pr_autosub.api.asr import AsrClient
from pr_autosub.api.cos import CosClient
from pr_autosub.bridge.editor import EditorBridge
from pr_autosub.config import (
    DEFAULT_PROJECT_NAME,
    POLL_INTERVAL_S,
    POLL_MAX_ATTEMPTS,
    SIGNED_URL_EXPIRES_S,
    STORAGE_KEY_PREFIX,
    PipelineConfig,
)
from pr_autosub.core.ir import RecognitionOptions, SentenceSource, TextResult
from pr_autosub.core.normalizer import normalize
from pr_autosub.core.poller import RecognitionService, submit_and_wait
from pr_autosub.errors import (
    BridgeCallError,
    ExportError,
    PersistError,
    PipelineCancelledError,
    ServiceError,
    SubtitleImportError,
    UploadError,
)
from pr_autosub.formatters import FORMATTERS
from pr_autosub.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]')

_RAW_PREVIEW_CHARS = 200


class StorageService(Protocol):
    """The object-storage calls the pipeline needs."""

    async def put_object(self, key: str, file_path: Path) -> None:
        ...

    def get_object_url(self, key: str, expires_s: int = SIGNED_URL_EXPIRES_S) -> str:
        ...

    async def delete_object(self, key: str) -> None:
        ...


@dataclass
class PipelineArtifacts:
    """Transient resources created by one run.

    RULES:
    - audio_path is set as soon as the export stage picks a path
    - storage_key is set as soon as the upload stage picks a key
    - subtitle_path is the persisted SRT; it is handed to the editor and kept
    """

    audio_path: Optional[Path] = None
    storage_key: Optional[str] = None
    subtitle_path: Optional[Path] = None


@dataclass
class PipelineResult:
    subtitle_path: Path
    sentence_count: int


def sanitize_filename(name: str, default: str = DEFAULT_PROJECT_NAME) -> str:
    """Replace path-unsafe characters; fall back to default for blank names.

    >>> sanitize_filename('Ep 1: "Pilot"')
    'Ep 1_ _Pilot_'
    """
    safe = UNSAFE_FILENAME_RE.sub("_", name.strip())
    return safe or default


def recognition_options(config: PipelineConfig) -> RecognitionOptions:
    return RecognitionOptions(
        engine_model_type=config.recognition_engine_model,
        hotword_id=config.hotword_set_id,
        convert_num_mode=config.number_conversion_mode,
    )


async def run(
    bridge: EditorBridge,
    config: PipelineConfig,
    on_status: Callable[[str], None] | None = None,
    *,
    storage: StorageService | None = None,
    recognizer: RecognitionService | None = None,
    cancel_event: asyncio.Event | None = None,
    poll_interval_s: float = POLL_INTERVAL_S,
    poll_max_attempts: int = POLL_MAX_ATTEMPTS,
    poll_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> PipelineResult:
    """Run the full export → import pipeline once.

    Args:
        bridge: Editor bridge used for export, project name and import.
        config: Credentials, storage addressing and recognition options.
        on_status: Optional log sink for human-readable progress lines.
        storage: Object storage client; a CosClient is created when None.
        recognizer: Recognition client; an AsrClient is created when None.
        cancel_event: When set, the run stops before its next stage.
        poll_interval_s: Delay before each recognition status check.
        poll_max_attempts: Status checks before giving up.
        poll_sleep: Awaitable delay used by the poller (injected by tests).

    Returns:
        PipelineResult with the imported subtitle path.

    Raises:
        PipelineError: the first stage failure, after cleanup has run.
    """
    artifacts = PipelineArtifacts()

    async with AsyncExitStack() as stack:
        if storage is None:
            storage = await stack.enter_async_context(
                CosClient(config.credentials, config.storage_bucket, config.storage_region)
            )
        if recognizer is None:
            recognizer = await stack.enter_async_context(
                AsrClient(config.credentials, config.storage_region)
            )

        try:
            return await _run_stages(
                bridge,
                config,
                storage,
                recognizer,
                artifacts,
                on_status,
                cancel_event,
                poll_interval_s,
                poll_max_attempts,
                poll_sleep,
            )
        finally:
            await cleanup(storage, artifacts, on_status)


async def _run_stages(
    bridge: EditorBridge,
    config: PipelineConfig,
    storage: StorageService,
    recognizer: RecognitionService,
    artifacts: PipelineArtifacts,
    on_status: Callable[[str], None] | None,
    cancel_event: asyncio.Event | None,
    poll_interval_s: float,
    poll_max_attempts: int,
    poll_sleep: Callable[[float], Awaitable[None]],
) -> PipelineResult:
    run_id = uuid.uuid4().hex
    audio_filename = "temp_audio_{}.mp3".format(run_id)

    # Step 1: Export
    _check_cancelled(cancel_event, "export")
    artifacts.audio_path = Path(config.work_dir) / audio_filename
    await export_audio(bridge, config, artifacts.audio_path, on_status)

    # Step 2: Upload
    _check_cancelled(cancel_event, "upload")
    artifacts.storage_key = STORAGE_KEY_PREFIX + audio_filename
    audio_url = await upload_audio(storage, artifacts.storage_key, artifacts.audio_path, on_status)

    # Step 3: Recognize
    _check_cancelled(cancel_event, "recognize")
    _status(on_status, "Submitting recognition task...")
    source = await submit_and_wait(
        recognizer,
        audio_url,
        recognition_options(config),
        on_status,
        interval_s=poll_interval_s,
        max_attempts=poll_max_attempts,
        sleep=poll_sleep,
        cancel_event=cancel_event,
    )

    # Step 4: Transcode
    _check_cancelled(cancel_event, "transcode")
    output, sentence_count = transcode(source, config.remove_punctuation, on_status)

    # Step 5: Persist
    _check_cancelled(cancel_event, "persist")
    project_name = await resolve_project_name(bridge, on_status)
    artifacts.subtitle_path = persist_subtitles(output, Path(config.work_dir), project_name, on_status)

    # Step 6: Import
    _check_cancelled(cancel_event, "import")
    await import_subtitles(bridge, artifacts.subtitle_path, on_status)

    return PipelineResult(subtitle_path=artifacts.subtitle_path, sentence_count=sentence_count)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


async def export_audio(
    bridge: EditorBridge,
    config: PipelineConfig,
    audio_path: Path,
    on_status: Callable[[str], None] | None = None,
) -> Path:
    """Ask the editor to export the sequence audio to audio_path.

    RULES:
    - The export preset must exist before the editor is called
    - The exported file must exist afterwards, whatever the editor answered
    """
    _status(on_status, "Exporting audio...")
    preset = Path(config.export_preset)
    if not preset.is_file():
        raise ExportError("export preset not found: {}".format(preset))

    try:
        audio_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExportError("cannot create work directory: {}".format(exc), cause=exc) from exc

    try:
        await bridge.export_audio(audio_path, preset.resolve())
    except BridgeCallError as exc:
        raise ExportError(exc.message, cause=exc) from exc

    if not audio_path.is_file():
        raise ExportError("audio file was not created: {}".format(audio_path))

    _status(on_status, "Audio exported.")
    return audio_path


async def upload_audio(
    storage: StorageService,
    key: str,
    audio_path: Path,
    on_status: Callable[[str], None] | None = None,
) -> str:
    """Upload the exported audio and return a signed retrieval URL."""
    _status(on_status, "Uploading to object storage...")
    try:
        await storage.put_object(key, audio_path)
        url = storage.get_object_url(key, SIGNED_URL_EXPIRES_S)
    except (ServiceError, OSError) as exc:
        raise UploadError(str(exc), cause=exc) from exc

    _status(on_status, "Upload complete, signed URL ready.")
    return url


def transcode(
    source: SentenceSource,
    remove_punctuation: bool,
    on_status: Callable[[str], None] | None = None,
) -> tuple:
    """Normalize a recognition result and render it as SRT.

    Returns:
        Tuple of (FormatterOutput, sentence_count).
    """
    _status(on_status, "Generating subtitles...")
    offset_seconds = 0.0
    _status(on_status, "Sequence in-point offset: {} s (forced to 0)".format(offset_seconds))

    sentences = normalize(source)
    if not sentences:
        if isinstance(source, TextResult):
            preview = source.text[:_RAW_PREVIEW_CHARS]
        else:
            preview = "structured result"
        _status(
            on_status,
            "Warning: no usable captions in the recognition result, "
            "writing an empty subtitle file",
            level=logging.WARNING,
        )
        _status(on_status, "Raw result: {}".format(preview), level=logging.WARNING)

    formatter = FORMATTERS["srt"](
        offset_seconds=offset_seconds,
        remove_punctuation=remove_punctuation,
    )
    return formatter.format(sentences)[0], len(sentences)


async def resolve_project_name(
    bridge: EditorBridge,
    on_status: Callable[[str], None] | None = None,
) -> str:
    """Return the project name, or the default when the editor cannot tell."""
    try:
        name = await bridge.get_project_name()
    except BridgeCallError as exc:
        logger.debug("getProjectName failed: %s", exc)
        _status(on_status, "Could not read the project name, using the default name.")
        return DEFAULT_PROJECT_NAME
    return name.strip() or DEFAULT_PROJECT_NAME


def persist_subtitles(
    output: FormatterOutput,
    work_dir: Path,
    project_name: str,
    on_status: Callable[[str], None] | None = None,
) -> Path:
    """Write the formatter output as <sanitized project name><suffix> in work_dir."""
    path = work_dir / "{}{}".format(sanitize_filename(project_name), output.suffix)
    try:
        path.write_text(output.content, encoding="utf-8")
    except OSError as exc:
        raise PersistError("cannot write {}: {}".format(path, exc), cause=exc) from exc

    _status(on_status, "Subtitle file saved: {}".format(path))
    return path


async def import_subtitles(
    bridge: EditorBridge,
    subtitle_path: Path,
    on_status: Callable[[str], None] | None = None,
) -> None:
    _status(on_status, "Importing subtitles into the project...")
    try:
        imported = await bridge.import_subtitle(subtitle_path)
    except BridgeCallError as exc:
        raise SubtitleImportError(exc.message, cause=exc) from exc

    if not imported:
        raise SubtitleImportError("editor reported the import failed for {}".format(subtitle_path))

    _status(on_status, "Subtitles imported.")


async def cleanup(
    storage: StorageService,
    artifacts: PipelineArtifacts,
    on_status: Callable[[str], None] | None = None,
) -> None:
    """Delete the temp audio file and the storage object, best-effort.

    RULES:
    - Each deletion is attempted once, only if its artifact was allocated
    - Failures are logged at warning level and never raised
    """
    if artifacts.audio_path is None and artifacts.storage_key is None:
        return

    _status(on_status, "Cleaning up...")

    if artifacts.audio_path is not None:
        try:
            artifacts.audio_path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to delete temp audio: %s", artifacts.audio_path)

    if artifacts.storage_key is not None:
        # Best-effort: the run outcome is already decided
        try:
            await storage.delete_object(artifacts.storage_key)
        except Exception:
            logger.warning(
                "Failed to delete storage object: %s", artifacts.storage_key, exc_info=True
            )


# ---------------------------------------------------------------------------
# Helpers (module-private)
# ---------------------------------------------------------------------------


def _check_cancelled(cancel_event: asyncio.Event | None, stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise PipelineCancelledError("cancelled before {}".format(stage))


def _status(
    on_status: Callable[[str], None] | None,
    message: str,
    level: int = logging.INFO,
) -> None:
    logger.log(level, message)
    if on_status:
        on_status(message)
