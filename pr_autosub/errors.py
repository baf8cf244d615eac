"""Error taxonomy for the subtitle pipeline.

WHY: The caller surfaces one terminal error per run and needs to know
which stage failed and why. Typed exceptions per stage make that explicit
and let tests assert on the failing stage.

HOW: PipelineError is the base; each stage has a subclass with a fixed
``stage`` name. The underlying exception (bridge error, service error,
OSError) is kept on ``cause`` and chained with ``raise ... from``.
ServiceError is raised by the remote-service adapters and is not itself a
stage error; the orchestrator and poller wrap it.

RULES:
- str(error) reads "<stage> failed: <message>"
- Only per-attempt polling failures are retried; everything else is terminal
- SubtitleImportError is named so it does not shadow the builtin ImportError
"""

from __future__ import annotations


class ServiceError(Exception):
    """Raised when a remote service call fails.

    WHY: The storage and recognition adapters wrap vendor SDKs. Callers need
    one typed exception covering both transport failures and vendor error
    payloads.

    RULES:
    - status_code is None when no HTTP status is known (SDK or transport errors)
    - code carries the vendor error code when the payload has one
    """

    def __init__(
        self,
        status_code: int | None,
        message: str,
        code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        prefix = "HTTP {}".format(status_code) if status_code is not None else "service"
        if code:
            prefix = "{} {}".format(prefix, code)
        super().__init__("{}: {}".format(prefix, message))


class PipelineError(Exception):
    """Base class for terminal pipeline failures."""

    stage = "pipeline"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__("{} failed: {}".format(self.stage, message))


class BridgeCallError(PipelineError):
    """An editor bridge call answered with an error response."""

    stage = "bridge"


class ExportError(PipelineError):
    stage = "export"


class UploadError(PipelineError):
    stage = "upload"


class JobCreationError(PipelineError):
    """Submitting the recognition job failed. Never retried."""

    stage = "recognize"


class RecognitionFailedError(PipelineError):
    """The remote job reached the failed state; message is the remote reason."""

    stage = "recognize"


class RecognitionTimeoutError(PipelineError):
    """Polling exhausted its attempt budget without a terminal status."""

    stage = "recognize"

    def __init__(self, task_id: str, attempts: int) -> None:
        self.task_id = task_id
        self.attempts = attempts
        super().__init__(
            "task {} did not finish after {} status checks".format(task_id, attempts)
        )


class TranscodeError(PipelineError):
    """Reserved for recognition results that cannot be degraded to a sentence list."""

    stage = "transcode"


class PersistError(PipelineError):
    stage = "persist"


class SubtitleImportError(PipelineError):
    stage = "import"


class PipelineCancelledError(PipelineError):
    stage = "cancelled"

    def __init__(self, message: str = "run was cancelled") -> None:
        super().__init__(message)
