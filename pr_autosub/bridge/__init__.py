"""Editor bridge — typed access to the host video editor.

WHY: The editor is reached through an opaque string-in/string-out script
channel. This package turns that into four typed async operations.

HOW: channel.py carries scripts to the editor; editor.py renders the
calls and decodes the answers.
"""

from pr_autosub.bridge.channel import HttpScriptChannel, ScriptChannel
from pr_autosub.bridge.editor import (
    BridgeError,
    BridgeOk,
    EditorBridge,
    decode_response,
)

__all__ = [
    "BridgeError",
    "BridgeOk",
    "EditorBridge",
    "HttpScriptChannel",
    "ScriptChannel",
    "decode_response",
]
