"""Core batch generation engine."""

from .batch import Batch, BatchStatus, ErrorRecord, PostRecord
from .batch_store import BatchStore
from .content_generator import ContentGenerator
from .formatting import EditorType, format_content, format_for_block_editor, format_for_classic_editor
from .generation_job import GenerationJob
from .posts import InMemoryPostService, Post, PostService, StorePostService
from .scheduled_generator import ScheduledGenerator, ScheduleResult
from .status import BatchStatusQuery
from .tasks import Continue, Done, InMemoryDispatcher, TaskDispatcher

__all__ = [
    "Batch",
    "BatchStatus",
    "BatchStatusQuery",
    "BatchStore",
    "ContentGenerator",
    "Continue",
    "Done",
    "EditorType",
    "ErrorRecord",
    "GenerationJob",
    "InMemoryDispatcher",
    "InMemoryPostService",
    "Post",
    "PostRecord",
    "PostService",
    "ScheduleResult",
    "StorePostService",
    "ScheduledGenerator",
    "TaskDispatcher",
    "format_content",
    "format_for_block_editor",
    "format_for_classic_editor",
]
