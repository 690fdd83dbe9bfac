"""Batch data model."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class BatchStatus(str, Enum):
    """Lifecycle state of a batch."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not BatchStatus.PROCESSING


@dataclass
class PostRecord:
    """A post created by one unit of work."""

    index: int
    post_id: int
    title: str
    created_at: int


@dataclass
class ErrorRecord:
    """A unit of work that did not produce a post."""

    index: int
    error: str
    timestamp: int


@dataclass
class Batch:
    """One bulk AI generation request and its aggregate progress.

    While the batch is processing, ``completed + pending == total`` holds.
    Once the status is terminal the mutators below do nothing.

    Attributes:
        batch_id: Opaque unique identifier
        total: Number of posts requested
        completed: Posts created so far
        pending: Posts not yet created (decremented on success only)
        posts_created: Created posts in processing order
        errors: Failed units in processing order
        status: processing, completed or failed
        created_at: Unix timestamp of creation
        completed_at: Unix timestamp when the last unit ran
        failed_at: Unix timestamp when the batch was aborted
        user_id: Owner of the batch
    """

    batch_id: str
    total: int
    completed: int = 0
    pending: int = 0
    posts_created: List[PostRecord] = field(default_factory=list)
    errors: List[ErrorRecord] = field(default_factory=list)
    status: BatchStatus = BatchStatus.PROCESSING
    created_at: int = 0
    completed_at: Optional[int] = None
    failed_at: Optional[int] = None
    user_id: int = 0

    @classmethod
    def create(cls, batch_id: str, total: int, user_id: int, now: int) -> 'Batch':
        """New batch with nothing processed yet."""
        return cls(batch_id=batch_id, total=total, pending=total, created_at=now, user_id=user_id)

    @property
    def is_processing(self) -> bool:
        return self.status == BatchStatus.PROCESSING

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def progress_percentage(self) -> int:
        """Completed posts as a whole percentage of total (0 for empty batches)."""
        if self.total <= 0:
            return 0
        return int(round(self.completed / self.total * 100))

    def record_success(self, index: int, post_id: int, title: str, now: int) -> None:
        if not self.is_processing:
            return
        self.completed += 1
        self.pending -= 1
        self.posts_created.append(PostRecord(index=index, post_id=post_id, title=title, created_at=now))

    def record_error(self, index: int, message: str, now: int) -> None:
        if not self.is_processing:
            return
        self.errors.append(ErrorRecord(index=index, error=message, timestamp=now))

    def mark_completed(self, now: int) -> None:
        if not self.is_processing:
            return
        self.status = BatchStatus.COMPLETED
        self.completed_at = now

    def mark_failed(self, now: int) -> None:
        if not self.is_processing:
            return
        self.status = BatchStatus.FAILED
        self.failed_at = now

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the key-value store."""
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Batch':
        """Deserialize from the key-value store."""
        return cls(
            batch_id=data["batch_id"],
            total=int(data.get("total", 0)),
            completed=int(data.get("completed", 0)),
            pending=int(data.get("pending", 0)),
            posts_created=[PostRecord(**p) for p in data.get("posts_created") or []],
            errors=[ErrorRecord(**e) for e in data.get("errors") or []],
            status=BatchStatus(data.get("status", BatchStatus.PROCESSING.value)),
            created_at=int(data.get("created_at") or 0),
            completed_at=data.get("completed_at"),
            failed_at=data.get("failed_at"),
            user_id=int(data.get("user_id") or 0),
        )

    def to_view(self) -> Dict[str, Any]:
        """Full status projection returned by status queries."""
        return {
            "batch_id": self.batch_id,
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "progress_percentage": self.progress_percentage,
            "status": self.status.value,
            "posts_created": [asdict(p) for p in self.posts_created],
            "errors": [asdict(e) for e in self.errors],
            "error_count": self.error_count,
            "created_at": self.created_at,
            "completed_at": self.completed_at,
            "failed_at": self.failed_at,
        }

    def to_summary(self) -> Dict[str, Any]:
        """Compact projection used by batch listings."""
        return {
            "batch_id": self.batch_id,
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "progress_percentage": self.progress_percentage,
            "status": self.status.value,
            "created_at": self.created_at,
            "completed_at": self.completed_at,
            "error_count": self.error_count,
        }
