"""Read-only queries over stored batches."""

from typing import Any, Dict, List, Optional

from ..exceptions import NotFoundError, ValidationError
from ..utils import get_logger
from .batch import Batch, BatchStatus
from .batch_store import BatchStore


logger = get_logger(__name__)


STATUS_FILTERS = ("all",) + tuple(s.value for s in BatchStatus)


class BatchStatusQuery:
    """Status lookups and listings for batches."""

    DEFAULT_LIMIT = 10
    MAX_LIMIT = 50

    def __init__(self, batch_store: BatchStore):
        self.batch_store = batch_store

    def get(self, batch_id: str) -> Dict[str, Any]:
        """Full status view of one batch.

        Raises:
            NotFoundError: If the batch does not exist or has expired
        """
        batch = self.batch_store.load(batch_id)
        if batch is None:
            raise NotFoundError("Batch not found or expired")
        return batch.to_view()

    def list_batches(
        self,
        status: str = "all",
        user_id: Optional[int] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> Dict[str, Any]:
        """List batches newest first.

        Args:
            status: "all", "processing", "completed" or "failed"
            user_id: Only batches owned by this user
            limit: Maximum number of batches returned (capped at MAX_LIMIT)

        Returns:
            {"batches": [summary, ...], "total": number returned}

        Raises:
            ValidationError: If status is not a known filter
        """
        if status not in STATUS_FILTERS:
            raise ValidationError(f"Invalid status filter: {status}")

        limit = max(1, min(int(limit), self.MAX_LIMIT))

        batches: List[Batch] = []
        for batch_id in self.batch_store.list_ids():
            batch = self.batch_store.load(batch_id)
            if batch is None:
                continue
            if status != "all" and batch.status.value != status:
                continue
            if user_id is not None and batch.user_id != user_id:
                continue
            batches.append(batch)

        # Stable sort keeps store order for batches created in the same second
        batches.sort(key=lambda b: b.created_at, reverse=True)
        summaries = [b.to_summary() for b in batches[:limit]]

        logger.debug(f"Listed {len(summaries)} batches (status={status}, user={user_id})")
        return {"batches": summaries, "total": len(summaries)}
