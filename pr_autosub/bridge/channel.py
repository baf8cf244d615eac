"""Transport for host-script calls into the editor.

WHY: Premiere Pro only runs ExtendScript inside its own process. The
panel that hosts this pipeline exposes evalScript over a local HTTP
endpoint, so the pipeline can run as an ordinary Python process.

HOW: ScriptChannel is the one-method protocol the bridge needs.
HttpScriptChannel POSTs the script source as text and returns the
response body, which is the string the host function returned.

RULES:
- One request per script call; no batching
- Transport failures raise BridgeCallError (the script never ran)
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from pr_autosub.errors import BridgeCallError

logger = logging.getLogger(__name__)


class ScriptChannel(Protocol):
    async def eval_script(self, script: str) -> str:
        ...


class HttpScriptChannel:
    """ScriptChannel over a local HTTP endpoint.

    Export and import can take minutes on long sequences, so the read
    timeout is generous.
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = 600.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = httpx.Timeout(timeout_s, connect=5.0)
        self._transport = transport

    async def eval_script(self, script: str) -> str:
        logger.debug("evalScript: %s", script)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    self._url,
                    content=script.encode("utf-8"),
                    headers={"Content-Type": "text/plain; charset=utf-8"},
                )
        except httpx.HTTPError as exc:
            raise BridgeCallError(
                "editor bridge unreachable at {}: {}".format(self._url, exc), cause=exc
            ) from exc

        if not resp.is_success:
            raise BridgeCallError(
                "editor bridge answered HTTP {}: {}".format(resp.status_code, resp.text)
            )
        return resp.text
