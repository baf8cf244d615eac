"""Async client for the Tencent Cloud file recognition API.

WHY: The pipeline submits one recognition job per run and polls its
status. This module hides the vendor SDK behind two methods that speak
the core IR (JobHandle, JobStatus).

HOW: Wraps tencentcloud-sdk-python's asr_client.AsrClient, which signs
and sends every request. The SDK is synchronous, so each call runs in a
worker thread via asyncio.to_thread(). AsrClient is an async context
manager: enter it to build the SDK client, exit to drop it.

RULES:
- Always use the async context manager (async with AsrClient(...) as asr:)
- TencentCloudSDKException and malformed responses raise ServiceError
- create_task() returns a JobHandle; describe_task() returns a JobStatus
- API version is fixed at 2019-06-14 (the asr.v20190614 module)
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from tencentcloud.asr.v20190614 import asr_client, models
from tencentcloud.common import credential
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile

from pr_autosub.api.models import TaskStatus
from pr_autosub.config import ASR_ENDPOINT, Credentials
from pr_autosub.core.ir import JobHandle, JobStatus, RecognitionOptions
from pr_autosub.errors import ServiceError

logger = logging.getLogger(__name__)


class AsrClient:
    """Async client for CreateRecTask / DescribeTaskStatus.

    RULES:
    - Use as: async with AsrClient(credentials, region) as asr: ...
    - endpoint defaults to ASR_ENDPOINT from config
    - sdk_client is only passed by tests (a stand-in for the SDK client)
    """

    def __init__(
        self,
        credentials: Credentials,
        region: str,
        endpoint: str | None = None,
        sdk_client: Any = None,
    ) -> None:
        self._credentials = credentials
        self._region = region
        self._endpoint = endpoint or ASR_ENDPOINT
        self._injected = sdk_client
        self._client: Any = None

    async def __aenter__(self) -> AsrClient:
        self._client = self._injected if self._injected is not None else self._build_sdk_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self._client = None

    def _build_sdk_client(self) -> asr_client.AsrClient:
        cred = credential.Credential(self._credentials.secret_id, self._credentials.secret_key)
        profile = ClientProfile(httpProfile=HttpProfile(endpoint=self._endpoint))
        return asr_client.AsrClient(cred, self._region, profile)

    def _ensure_client(self) -> Any:
        """Return the active SDK client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "AsrClient must be used as an async context manager: "
                "async with AsrClient(...) as asr: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    async def create_task(self, audio_url: str, options: RecognitionOptions) -> JobHandle:
        """Submit a recognition job for audio reachable at audio_url.

        Returns:
            JobHandle wrapping the service's TaskId.
        """
        params: dict[str, Any] = {
            "EngineModelType": options.engine_model_type,
            "ChannelNum": options.channel_num,
            "ResTextFormat": options.res_text_format,
            "SourceType": options.source_type,
            "Url": audio_url,
            "ConvertNumMode": options.convert_num_mode,
        }
        if options.hotword_id:
            params["HotwordId"] = options.hotword_id

        request = models.CreateRecTaskRequest()
        request.from_json_string(json.dumps(params))

        data = await self._call("CreateRecTask", request)
        task_id = data.get("TaskId")
        if task_id is None:
            raise ServiceError(None, "CreateRecTask response has no Data.TaskId")
        return JobHandle(task_id=str(task_id))

    async def describe_task(self, handle: JobHandle) -> JobStatus:
        """Query one status snapshot of a recognition job."""
        request = models.DescribeTaskStatusRequest()
        request.TaskId = int(handle.task_id)

        data = await self._call("DescribeTaskStatus", request)
        if not isinstance(data.get("StatusStr"), str):
            raise ServiceError(None, "DescribeTaskStatus response has no Data.StatusStr")
        return TaskStatus.from_dict(data).to_job_status()

    async def _call(self, action: str, request: Any) -> dict[str, Any]:
        """Run one SDK action in a worker thread and return its "Data" object."""
        client = self._ensure_client()
        try:
            response = await asyncio.to_thread(getattr(client, action), request)
        except TencentCloudSDKException as exc:
            raise ServiceError(
                None, exc.get_message() or str(exc), code=exc.get_code()
            ) from exc

        try:
            body = json.loads(response.to_json_string())
        except (AttributeError, TypeError, ValueError) as exc:
            raise ServiceError(None, "Malformed {} response".format(action)) from exc

        data = body.get("Data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ServiceError(None, "Malformed {} response: no Data object".format(action))

        logger.debug("%s ok (RequestId %s)", action, body.get("RequestId"))
        return data
