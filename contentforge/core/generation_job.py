"""GenerationJob data model."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Union

from ..exceptions import ValidationError
from .formatting import EditorType


@dataclass
class GenerationJob:
    """One unit of work: generate and persist a single post.

    Exists only as the payload of a scheduled task.

    Attributes:
        batch_id: Batch this unit belongs to
        current_index: Position of this unit in the batch (0-based)
        total_count: Number of units in the batch
        post_type: Post type to create ("post", "page", ...)
        post_status: Status of the created post
        content_type: Content type slug used to build the prompt
        ai_prompt: Extra instructions appended to the prompt
        editor_type: "block" or "classic"
        user_id: Author of the created post
        product_options: Extra fields passed through to post creation
    """

    batch_id: str
    current_index: int
    total_count: int
    content_type: str
    post_type: str = "post"
    post_status: str = "draft"
    ai_prompt: str = ""
    editor_type: str = EditorType.BLOCK.value
    user_id: int = 0
    product_options: Dict[str, Any] = field(default_factory=dict)

    REQUIRED_KEYS = (
        "batch_id", "current_index", "total_count", "post_type", "post_status",
        "content_type", "ai_prompt", "editor_type", "user_id",
    )

    @property
    def has_next(self) -> bool:
        return self.current_index + 1 < self.total_count

    def next(self) -> 'GenerationJob':
        """The job for the following index."""
        return replace(self, current_index=self.current_index + 1, product_options=dict(self.product_options))

    def to_payload(self) -> Dict[str, Any]:
        """Serialize as a task payload."""
        payload = {
            "batch_id": self.batch_id,
            "current_index": self.current_index,
            "total_count": self.total_count,
            "post_type": self.post_type,
            "post_status": self.post_status,
            "content_type": self.content_type,
            "ai_prompt": self.ai_prompt,
            "editor_type": self.editor_type,
            "user_id": self.user_id,
        }
        if self.product_options:
            payload["product_options"] = dict(self.product_options)
        return payload

    @classmethod
    def from_payload(cls, payload: Union[Dict[str, Any], List[Any]]) -> 'GenerationJob':
        """Deserialize a task payload.

        Accepts the payload dict itself or a one-element list wrapping it,
        which is how positional task arguments arrive from some dispatchers.

        Raises:
            ValidationError: If the payload is malformed
        """
        if isinstance(payload, (list, tuple)) and payload and isinstance(payload[0], dict):
            payload = payload[0]

        if not isinstance(payload, dict):
            raise ValidationError("Task payload must be a mapping")

        missing = [key for key in cls.REQUIRED_KEYS if payload.get(key) is None]
        if missing:
            raise ValidationError(f"Task payload is missing keys: {', '.join(missing)}")

        product_options = payload.get("product_options")

        return cls(
            batch_id=str(payload["batch_id"]),
            current_index=int(payload["current_index"]),
            total_count=int(payload["total_count"]),
            post_type=payload["post_type"],
            post_status=payload["post_status"],
            content_type=payload["content_type"],
            ai_prompt=payload["ai_prompt"],
            editor_type=payload["editor_type"],
            user_id=int(payload["user_id"]),
            product_options=dict(product_options) if isinstance(product_options, dict) else {},
        )
