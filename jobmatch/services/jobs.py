"""Job posting management."""

from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Union
from uuid import uuid4

from jobmatch.ai.base import EmbeddingProvider
from jobmatch.domain.exceptions import NotFoundError, ValidationError
from jobmatch.domain.models import Job, embedding_from_raw, lowercase_terms
from jobmatch.logging import get_logger
from jobmatch.logging.context import log_context
from jobmatch.persistence import DataIntegrityError, JobRepository, get_session

from .schemas import CreateJobPayload, UpdateJobPayload, parse_payload, provided_fields

logger = get_logger(__name__, component="jobs")

DUPLICATE_TITLE = "A job with that title already exists"

JobCreatedHook = Callable[[Job], Any]


class JobService:
    """Creates, reads, updates and deletes job postings.

    Titles are unique. The uniqueness check runs before any embedding call so a
    duplicate never costs a provider request. After a job is stored, the
    optional on_job_created hook runs synchronously (normally a matching pass);
    its errors propagate to the caller.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        on_job_created: Optional[JobCreatedHook] = None,
    ):
        self.embedder = embedder
        self.on_job_created = on_job_created

    def create_job(self, payload: Union[CreateJobPayload, Mapping[str, Any]]) -> Job:
        """Store a new job posting and run the post-create hook.

        Raises:
            ValidationError: If the payload is invalid or the title is taken
            AIProviderError: If embedding the categories fails
        """
        data = parse_payload(CreateJobPayload, payload)
        self._ensure_title_available(data.title)

        categories = lowercase_terms(data.categories)
        embeddings = self.embedder.embed(categories) if categories else None

        job = Job(
            id=uuid4().hex,
            title=data.title,
            description=data.description,
            categories=categories,
            embeddings=embeddings,
            posted_by=data.posted_by,
            created_at=datetime.now(timezone.utc),
            closed_at=data.closed_at,
        )

        try:
            with get_session() as session:
                created = JobRepository(session).add(job)
        except DataIntegrityError as e:
            raise ValidationError(DUPLICATE_TITLE) from e

        with log_context(job_id=created.id):
            logger.info(
                f"Job created: {created.title}",
                extra={"event": "job.created", "category_count": len(categories)},
            )
            if self.on_job_created is not None:
                self.on_job_created(created)

        return created

    def list_jobs(self) -> List[Job]:
        with get_session() as session:
            return JobRepository(session).list_all()

    def get_job(self, job_id: str) -> Job:
        """Raises NotFoundError when no job has this id."""
        with get_session() as session:
            job = JobRepository(session).get_by_id(job_id)
        if job is None:
            raise NotFoundError(f"No job with id {job_id}", entity="job", entity_id=job_id)
        return job

    def update_job(self, job_id: str, payload: Union[UpdateJobPayload, Mapping[str, Any]]) -> Job:
        """Apply a partial update.

        Categories are lowercased and re-embedded only when present in the payload.

        Raises:
            ValidationError: If the payload is invalid or the new title is taken
            NotFoundError: If no job has this id
        """
        changes = provided_fields(parse_payload(UpdateJobPayload, payload))
        existing = self.get_job(job_id)

        if changes.get("title") and changes["title"] != existing.title:
            self._ensure_title_available(changes["title"])

        if "categories" in changes:
            changes["categories"] = lowercase_terms(changes["categories"] or [])
            changes["embeddings"] = (
                embedding_from_raw(self.embedder.embed(changes["categories"]))
                if changes["categories"]
                else None
            )

        # closed_at and posted_by may be cleared; the rest are required
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key in ("embeddings", "closed_at", "posted_by")
        }
        updated = existing.model_copy(update=changes)

        try:
            with get_session() as session:
                saved = JobRepository(session).update(updated)
        except DataIntegrityError as e:
            raise ValidationError(DUPLICATE_TITLE) from e

        with log_context(job_id=job_id):
            logger.info("Job updated", extra={"event": "job.updated", "fields": sorted(changes)})
        return saved

    def delete_job(self, job_id: str) -> Job:
        """Raises NotFoundError when no job has this id."""
        self.get_job(job_id)
        with get_session() as session:
            removed = JobRepository(session).delete(job_id)
        with log_context(job_id=job_id):
            logger.info("Job deleted", extra={"event": "job.deleted"})
        return removed

    def _ensure_title_available(self, title: str) -> None:
        with get_session() as session:
            if JobRepository(session).get_by_title(title) is not None:
                raise ValidationError(DUPLICATE_TITLE)
