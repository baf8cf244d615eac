"""Fake collaborators for the poller and pipeline tests.

WHY: The pipeline talks to three systems (editor bridge, storage,
recognition service). In-memory doubles let the tests script each one's
answers and assert the exact calls made.

RULES:
- No fake touches the network
- Fakes record calls in plain lists so tests can assert exact sequences
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from pr_autosub.core.ir import JobHandle, Pending
from pr_autosub.errors import BridgeCallError


class FakeEditorBridge:
    """Editor bridge double; export writes a small fake mp3."""

    def __init__(
        self,
        export_error: str | None = None,
        write_audio: bool = True,
        project_name: str | None = "My Project",
        import_result: bool = True,
        import_error: str | None = None,
    ) -> None:
        self.export_error = export_error
        self.write_audio = write_audio
        self.project_name = project_name
        self.import_result = import_result
        self.import_error = import_error
        self.calls: List[tuple] = []

    async def export_audio(self, output_path, preset_path) -> None:
        self.calls.append(("export_audio", Path(output_path), Path(preset_path)))
        if self.export_error:
            raise BridgeCallError(self.export_error)
        if self.write_audio:
            Path(output_path).write_bytes(b"ID3fake-mp3")

    async def import_subtitle(self, file_path) -> bool:
        self.calls.append(("import_subtitle", Path(file_path)))
        if self.import_error:
            raise BridgeCallError(self.import_error)
        return self.import_result

    async def get_project_name(self) -> str:
        self.calls.append(("get_project_name",))
        if self.project_name is None:
            raise BridgeCallError("EvalScript error.")
        return self.project_name

    async def get_sequence_in_point(self) -> float:
        self.calls.append(("get_sequence_in_point",))
        return 12.5


class FakeStorage:
    """In-memory object storage double."""

    def __init__(self, put_error: Exception | None = None, delete_error: Exception | None = None):
        self.put_error = put_error
        self.delete_error = delete_error
        self.objects: Dict[str, bytes] = {}
        self.put_calls: List[str] = []
        self.delete_calls: List[str] = []
        self.url_calls: List[tuple] = []

    async def put_object(self, key, file_path) -> None:
        self.put_calls.append(key)
        if self.put_error:
            raise self.put_error
        self.objects[key] = Path(file_path).read_bytes()

    def get_object_url(self, key, expires_s=3600) -> str:
        self.url_calls.append((key, expires_s))
        return "https://bucket.example/{}?sign=abc".format(key)

    async def delete_object(self, key) -> None:
        self.delete_calls.append(key)
        if self.delete_error:
            raise self.delete_error
        self.objects.pop(key, None)


class FakeRecognizer:
    """Recognition service double replaying a scripted list of statuses.

    Items in ``statuses`` are JobStatus values or exceptions to raise.
    Once the script runs out every check answers Pending("doing").
    """

    def __init__(self, statuses=None, create_error: Exception | None = None):
        self.statuses = list(statuses or [])
        self.create_error = create_error
        self.create_calls: List[tuple] = []
        self.describe_calls = 0

    async def create_task(self, audio_url, options) -> JobHandle:
        self.create_calls.append((audio_url, options))
        if self.create_error:
            raise self.create_error
        return JobHandle(task_id="4242")

    async def describe_task(self, handle):
        self.describe_calls += 1
        if not self.statuses:
            return Pending("doing")
        item = self.statuses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


async def no_sleep(seconds: float) -> None:
    return None
