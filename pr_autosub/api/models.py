"""Recognition API response dataclasses.

WHY: The recognition status endpoint returns a flat JSON object that mixes
progress (Status/StatusStr), failure info (ErrorMsg) and the result in two
shapes (Result text, ResultDetail array). Typed parsing in one place keeps
that shape-sniffing out of the pipeline.

HOW: TaskStatus.from_dict parses the "Data" object of a
DescribeTaskStatus response; to_job_status() decodes it into the
Pending | Succeeded | Failed union from the core IR.

RULES:
- status_str is one of: "waiting", "doing", "success", "failed"
- A non-empty ResultDetail list wins over the Result text
- Unknown status strings are treated as still pending
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pr_autosub.core.ir import (
    Failed,
    JobStatus,
    Pending,
    StructuredResult,
    Succeeded,
    TextResult,
)


@dataclass
class TaskStatus:
    """Status of a recognition task from DescribeTaskStatus.

    RULES:
    - task_id is kept as a string even though the API sends an integer
    - result_detail is None when the service omitted it
    - error_msg is only meaningful when status_str is "failed"
    """

    task_id: str
    status_str: str
    status: int | None = None
    result: str = ""
    error_msg: str = ""
    result_detail: list[dict[str, Any]] | None = field(default=None)

    @classmethod
    def from_dict(cls, data: dict) -> TaskStatus:
        """Parse the "Data" object of a DescribeTaskStatus response."""
        detail = data.get("ResultDetail")
        return cls(
            task_id=str(data["TaskId"]),
            status_str=data["StatusStr"],
            status=data.get("Status"),
            result=data.get("Result") or "",
            error_msg=data.get("ErrorMsg") or "",
            result_detail=detail if isinstance(detail, list) else None,
        )

    def to_job_status(self) -> JobStatus:
        if self.status_str == "success":
            if self.result_detail:
                return Succeeded(StructuredResult(list(self.result_detail)))
            return Succeeded(TextResult(self.result))
        if self.status_str == "failed":
            return Failed(self.error_msg or "recognition failed without an error message")
        return Pending(self.status_str)
