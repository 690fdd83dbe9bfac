"""Scheduled batch generation.

A batch of N posts is generated one post at a time. Each unit of work runs
as its own deferred task and, when it is done, schedules the next unit a few
seconds later, so only one vendor request per batch is ever in flight and a
crashed process picks up where the task queue left off.
"""

import time
import uuid
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from ..exceptions import ContentForgeError, NotFoundError, PostCreationError, SchedulingError, ValidationError
from ..utils import get_logger
from .batch import Batch
from .batch_store import BatchStore
from .content_generator import ContentGenerator
from .formatting import EditorType
from .generation_job import GenerationJob
from .posts import PostService
from .tasks import Continuation, Continue, Done, TaskDispatcher, drive


logger = get_logger(__name__)


DAY_IN_SECONDS = 86400

GeneratorFactory = Callable[[Any, str], ContentGenerator]


def _default_generator_factory(settings, editor_type: str) -> ContentGenerator:
    return ContentGenerator.from_settings(settings, editor_type=editor_type)


@dataclass
class ScheduleResult:
    """Outcome of scheduling a batch."""

    batch_id: str
    total_jobs: int
    first_task_id: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ScheduledGenerator:
    """Runs AI batch generation as a chain of deferred tasks.

    Example:
        >>> generator = ScheduledGenerator(BatchStore(store), dispatcher, posts, settings)
        >>> result = generator.schedule_generation({"post_number": 3, "content_type": "technology"})
        >>> dispatcher.run_until_idle()
        >>> generator.get_batch_status(result.batch_id)["status"]
        'completed'
    """

    SEQUENTIAL_HOOK = "cforge_generate_sequential_ai_content"
    CLEANUP_HOOK = "cforge_cleanup_batch_data"
    GROUP_PREFIX = "cforge_batch_"

    def __init__(
        self,
        batch_store: BatchStore,
        dispatcher: TaskDispatcher,
        post_service: PostService,
        settings,
        generator_factory: Optional[GeneratorFactory] = None,
        clock: Callable[[], float] = time.time,
        step_delay: float = 5,
        cleanup_delay: float = DAY_IN_SECONDS,
    ):
        """Initialize the generator and register its task handlers.

        Args:
            batch_store: Persistence for batch records
            dispatcher: Deferred task dispatcher
            post_service: Creates posts from generated content
            settings: AISettingsManager providing the active provider and key
            generator_factory: Builds a ContentGenerator from (settings,
                editor_type); defaults to ContentGenerator.from_settings
            clock: Source of the current Unix time
            step_delay: Seconds between consecutive units of a batch
            cleanup_delay: Seconds after which a finished batch is deleted
        """
        self.batch_store = batch_store
        self.dispatcher = dispatcher
        self.post_service = post_service
        self.settings = settings
        self.generator_factory = generator_factory or _default_generator_factory
        self.clock = clock
        self.step_delay = step_delay
        self.cleanup_delay = cleanup_delay

        dispatcher.on_task(self.SEQUENTIAL_HOOK, self.handle_sequential_generation)
        dispatcher.on_task(self.CLEANUP_HOOK, self.cleanup_batch_data)

    def _now(self) -> int:
        return int(self.clock())

    def group_for(self, batch_id: str) -> str:
        """Dispatcher group holding all tasks of a batch."""
        return f"{self.GROUP_PREFIX}{batch_id}"

    def schedule_generation(self, params: Dict[str, Any]) -> ScheduleResult:
        """Create a batch and schedule its first unit.

        Args:
            params: Mapping with post_number and content_type, optionally
                post_type, post_status, ai_prompt, editor_type, user_id and
                product_options

        Returns:
            ScheduleResult describing the new batch

        Raises:
            ValidationError: If post_number < 1 or content_type is empty
            SchedulingError: If the dispatcher refuses the first task
        """
        try:
            total = int(params.get("post_number") or 0)
        except (TypeError, ValueError):
            total = 0
        if total < 1:
            raise ValidationError("Number of posts must be at least 1.")

        content_type = str(params.get("content_type") or "").strip()
        if not content_type:
            raise ValidationError("Content type is required.")

        editor_type = params.get("editor_type") or EditorType.BLOCK.value
        product_options = params.get("product_options")

        batch_id = f"batch_{uuid.uuid4().hex}"
        user_id = int(params.get("user_id") or 0)
        now = self._now()

        self.batch_store.save(Batch.create(batch_id, total=total, user_id=user_id, now=now))

        job = GenerationJob(
            batch_id=batch_id,
            current_index=0,
            total_count=total,
            content_type=content_type,
            post_type=params.get("post_type") or "post",
            post_status=params.get("post_status") or "draft",
            ai_prompt=params.get("ai_prompt") or "",
            editor_type=editor_type,
            user_id=user_id,
            product_options=dict(product_options) if isinstance(product_options, dict) else {},
        )

        task_id = self.dispatcher.schedule_once(
            now,
            self.SEQUENTIAL_HOOK,
            job.to_payload(),
            group=self.group_for(batch_id),
            unique=True,
        )
        if not task_id:
            self.batch_store.delete(batch_id)
            logger.error(f"Dispatcher refused first unit of {batch_id}")
            raise SchedulingError("Failed to schedule AI generation.")

        logger.info(f"Created batch {batch_id}: {total} {content_type} posts")

        return ScheduleResult(
            batch_id=batch_id,
            total_jobs=total,
            first_task_id=task_id,
            message=f"Started generating {total} AI posts...",
        )

    def execute_unit(self, job: GenerationJob) -> Continuation:
        """Generate and store one post of a batch.

        Returns:
            Continue with the next job, or Done with "completed", "failed"
            or "missing" (the batch was deleted)
        """
        batch = self.batch_store.load(job.batch_id)
        if batch is None:
            logger.info(f"Batch {job.batch_id} no longer exists, stopping")
            return Done("missing")

        if not batch.is_processing:
            logger.warning(f"Batch {job.batch_id} is already {batch.status.value}, skipping unit {job.current_index}")
            return Done("skipped")

        logger.info(f"Batch {job.batch_id}: generating {job.current_index + 1}/{job.total_count}")

        if not self.settings.get_api_key(self.settings.get_active_provider()):
            now = self._now()

            def fail(b: Batch) -> None:
                b.record_error(job.current_index, "AI API key not configured", now)
                b.mark_failed(now)

            if self.batch_store.update(job.batch_id, fail) is None:
                return Done("missing")

            logger.error(f"✗ Batch {job.batch_id} failed: AI API key not configured")
            return Done("failed")

        post_id = None
        title = ""
        error = None
        try:
            generator = self.generator_factory(self.settings, job.editor_type)
            result = generator.generate(job.content_type, job.ai_prompt)
            title = result.title

            extra = {"product_options": job.product_options} if job.product_options else {}
            post_id = self.post_service.create_post(
                job.post_type, job.post_status, result.title, result.content, job.user_id, **extra
            )
            if not post_id:
                raise PostCreationError("Failed to create post from generated content")
        except ContentForgeError as e:
            error = e.message
        except Exception as e:
            logger.error(f"Unexpected error in batch {job.batch_id} unit {job.current_index}: {e}", exc_info=True)
            error = str(e) or type(e).__name__

        now = self._now()

        def apply(b: Batch) -> None:
            if error is None:
                b.record_success(job.current_index, post_id, title, now)
            else:
                b.record_error(job.current_index, error, now)
            if not job.has_next:
                b.mark_completed(now)

        updated = self.batch_store.update(job.batch_id, apply)
        if updated is None:
            logger.info(f"Batch {job.batch_id} was deleted while unit {job.current_index} ran")
            return Done("missing")

        if error is None:
            logger.info(f"✓ Batch {job.batch_id}: created post {post_id} ({job.current_index + 1}/{job.total_count})")
        else:
            logger.warning(f"✗ Batch {job.batch_id}: unit {job.current_index} failed: {error}")

        if job.has_next:
            return Continue(job.next(), self.step_delay)

        logger.info(
            f"Batch {job.batch_id} completed: {updated.completed}/{updated.total} posts, "
            f"{updated.error_count} errors"
        )
        return Done("completed")

    def handle_sequential_generation(self, payload: Any) -> Optional[Done]:
        """Dispatcher callback for one unit of a batch.

        Runs the unit, then schedules either the next unit or the cleanup of
        a finished batch.

        Returns:
            The Done result when the chain ended, else None
        """
        try:
            job = GenerationJob.from_payload(payload)
        except ValidationError as e:
            logger.warning(f"Dropping malformed generation task: {e.message}")
            return None

        continuation = self.execute_unit(job)
        if isinstance(continuation, Continue):
            continuation = Continue(continuation.payload.to_payload(), continuation.delay)

        now = self._now()
        task_id, done = drive(continuation, self.dispatcher, self.SEQUENTIAL_HOOK, now, group=self.group_for(job.batch_id))

        if done is None and not task_id:
            done = self._fail_unscheduled(job.batch_id, job.current_index + 1, now)

        if done is not None and done.status in ("completed", "failed"):
            self.dispatcher.schedule_once(now + self.cleanup_delay, self.CLEANUP_HOOK, job.batch_id)
            logger.debug(f"Scheduled cleanup of {job.batch_id} in {self.cleanup_delay:.0f}s")

        return done

    def _fail_unscheduled(self, batch_id: str, index: int, now: int) -> Done:
        """Fail a batch whose next unit the dispatcher refused."""
        logger.error(f"✗ Dispatcher refused unit {index} of {batch_id}, failing batch")

        def fail(b: Batch) -> None:
            b.record_error(index, "Failed to schedule next AI generation.", now)
            b.mark_failed(now)

        if self.batch_store.update(batch_id, fail) is None:
            return Done("missing")
        return Done("failed")

    def get_batch_status(self, batch_id: str) -> Dict[str, Any]:
        """Full status view of a batch.

        Raises:
            NotFoundError: If the batch does not exist or has expired
        """
        batch = self.batch_store.load(batch_id)
        if batch is None:
            raise NotFoundError("Batch not found or expired")
        return batch.to_view()

    def cleanup_batch_data(self, batch_id: Any) -> None:
        """Delete a batch record. Deleting a missing batch is a no-op."""
        if isinstance(batch_id, (list, tuple)) and batch_id:
            batch_id = batch_id[0]
        self.batch_store.delete(str(batch_id))
        logger.info(f"Cleaned up batch {batch_id}")
