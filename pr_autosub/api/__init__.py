"""Remote service clients — object storage and speech recognition.

WHY: The pipeline uploads audio, hands a signed URL to the recognition
service, polls the job, and deletes the object afterwards. This package
encapsulates that communication behind two async client classes.

HOW: CosClient wraps cos-python-sdk-v5, AsrClient wraps
tencentcloud-sdk-python. The SDKs do the request signing; their blocking
calls run in worker threads. Response parsing lives in models.py.

RULES:
- All vendor SDK usage goes through these clients
- Every failure surfaces as pr_autosub.errors.ServiceError
"""

from pr_autosub.api.asr import AsrClient
from pr_autosub.api.cos import CosClient
from pr_autosub.api.models import TaskStatus

__all__ = ["AsrClient", "CosClient", "TaskStatus"]
