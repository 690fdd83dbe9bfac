"""Type definitions shared across Content Forge."""

from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel


class GeneratedContent(BaseModel):
    """Title and body returned by an AI provider.

    Also used to validate the JSON object the model is instructed to return.
    """

    title: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "content": self.content}


@dataclass
class ConnectionResult:
    """Outcome of a provider connectivity/credential check."""

    success: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}
