"""Editor bridge — the four host-script operations the pipeline uses.

WHY: Host functions answer with plain strings: "success", "failed", a
value, or "Error: <message>". Pattern-matching those strings all over the
pipeline is fragile, so they are decoded exactly once here into a tagged
BridgeOk | BridgeError result and failures become BridgeCallError.

HOW: Each operation renders a call such as
``exportSequenceAudio("C:\\\\tmp\\\\a.mp3", "C:\\\\mp3.epr")`` with
arguments encoded as JSON string literals, sends it through a
ScriptChannel, and decodes the answer with decode_response().

RULES:
- A response starting with "Error" is a failure; the rest is the message
- The "EvalScript error" sentinel from the channel is also a failure
- import_subtitle() returns False for "failed" instead of raising
- get_sequence_in_point() is part of the contract but unused by the pipeline
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from pr_autosub.bridge.channel import ScriptChannel
from pr_autosub.errors import BridgeCallError

ERROR_PREFIX = "Error"
EVAL_SCRIPT_ERROR = "EvalScript error"
SUCCESS = "success"


@dataclass(frozen=True)
class BridgeOk:
    value: str


@dataclass(frozen=True)
class BridgeError:
    message: str


BridgeResult = Union[BridgeOk, BridgeError]


def decode_response(raw: object) -> BridgeResult:
    """Decode a raw host-script answer.

    >>> decode_response("Error: No active sequence")
    BridgeError(message='No active sequence')
    >>> decode_response("success")
    BridgeOk(value='success')
    """
    text = "" if raw is None else str(raw)
    if text.startswith(ERROR_PREFIX):
        message = text[len(ERROR_PREFIX):].lstrip(":").strip()
        return BridgeError(message or text)
    if EVAL_SCRIPT_ERROR in text:
        return BridgeError(text)
    return BridgeOk(text)


def render_call(function: str, *args: object) -> str:
    return "{}({})".format(function, ", ".join(json.dumps(str(a)) for a in args))


class EditorBridge:
    """Typed wrapper over the host functions in the editor panel."""

    def __init__(self, channel: ScriptChannel) -> None:
        self._channel = channel

    async def _call(self, function: str, *args: object) -> str:
        raw = await self._channel.eval_script(render_call(function, *args))
        result = decode_response(raw)
        if isinstance(result, BridgeError):
            raise BridgeCallError("{}: {}".format(function, result.message))
        return result.value

    async def export_audio(self, output_path: object, preset_path: object) -> None:
        """Export the active sequence's audio (in/out range) with the preset."""
        await self._call("exportSequenceAudio", output_path, preset_path)

    async def import_subtitle(self, file_path: object) -> bool:
        """Import a caption file into the project; True when the host reports success."""
        value = await self._call("importSRT", file_path)
        return value.strip() == SUCCESS

    async def get_project_name(self) -> str:
        return await self._call("getProjectName")

    async def get_sequence_in_point(self) -> float:
        value = await self._call("getSequenceInPoint")
        try:
            return float(value)
        except ValueError:
            raise BridgeCallError("getSequenceInPoint: not a number: {!r}".format(value))
