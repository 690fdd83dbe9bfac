"""Custom JSON encoder for Content Forge objects."""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel


class ContentForgeJSONEncoder(json.JSONEncoder):
    """JSON encoder that understands dataclasses, enums and pydantic models.

    Usage:
        ```python
        import json
        from contentforge.utils import ContentForgeJSONEncoder

        json.dumps(batch, cls=ContentForgeJSONEncoder, indent=2)
        ```
    """

    def default(self, obj: Any) -> Any:
        """Convert objects to JSON-serializable format."""
        # Records with their own serializer
        if hasattr(obj, "to_dict") and callable(obj.to_dict):
            return obj.to_dict()

        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)

        if isinstance(obj, BaseModel):
            return obj.model_dump()

        if isinstance(obj, Enum):
            return obj.value

        return super().default(obj)
