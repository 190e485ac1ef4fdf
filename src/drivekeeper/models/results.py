"""Result models returned by the lifecycle managers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional, Sequence


ResultStatus = Literal["success", "error"]


class ErrorKind(str, Enum):
    """Error tags carried by failed results."""

    SIZE_EXCEEDED = "SizeExceeded"
    UPLOAD_FAILED = "UploadFailed"
    NOT_FOUND = "NotFound"
    DELETE_FAILED = "DeleteFailed"
    VALIDATION = "Validation"
    REPOSITORY = "Repository"
    UNAUTHENTICATED = "Unauthenticated"


@dataclass(slots=True)
class OperationResult:
    """Tagged success/error outcome of a single manager operation."""

    status: ResultStatus
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    item_id: Optional[str] = None
    record: Any = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(
        cls,
        *,
        item_id: Optional[str] = None,
        record: Any = None,
        message: Optional[str] = None,
    ) -> "OperationResult":
        return cls(status="success", item_id=item_id, record=record, message=message)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        item_id: Optional[str] = None,
    ) -> "OperationResult":
        return cls(status="error", kind=kind, message=message, item_id=item_id)


@dataclass(slots=True)
class RejectedUpload:
    """An upload refused before transfer, with the reason shown to users."""

    file_name: str
    reason: str


@dataclass(slots=True)
class BatchSummary:
    """Aggregate counts for a batch; partial failure is reported here, not raised."""

    successes: int = 0
    failures: int = 0
    rejected: list[RejectedUpload] = field(default_factory=list)
    results: list[OperationResult] = field(default_factory=list)

    @classmethod
    def from_results(
        cls,
        results: Sequence[OperationResult],
        rejected: Sequence[RejectedUpload] = (),
    ) -> "BatchSummary":
        successes = sum(1 for r in results if r.ok)
        return cls(
            successes=successes,
            failures=len(results) - successes,
            rejected=list(rejected),
            results=list(results),
        )

    @property
    def status(self) -> Literal["success", "partial", "error", "empty"]:
        if self.successes and not self.failures:
            return "success"
        if self.successes and self.failures:
            return "partial"
        if self.failures:
            return "error"
        return "empty"

    @property
    def message(self) -> str:
        total = self.successes + self.failures
        if self.status == "success":
            noun = "file" if self.successes == 1 else "files"
            return f"{self.successes} {noun} uploaded successfully"
        if self.status == "partial":
            return f"{self.successes} of {total} files uploaded successfully"
        if self.status == "error":
            noun = "file" if self.failures == 1 else "files"
            return f"Failed to upload {self.failures} {noun}"
        return "No files uploaded"
