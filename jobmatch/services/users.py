"""User registration and profile management."""

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union
from uuid import uuid4

from jobmatch.ai.base import EmbeddingProvider
from jobmatch.domain.exceptions import NotFoundError, ValidationError
from jobmatch.domain.models import User, embedding_from_raw, lowercase_terms
from jobmatch.logging import get_logger
from jobmatch.logging.context import log_context
from jobmatch.persistence import DataIntegrityError, UserRepository, get_session

from .schemas import CreateUserPayload, UpdateUserPayload, parse_payload, provided_fields

logger = get_logger(__name__, component="users")


class UserService:
    """Creates, reads, updates and deletes users.

    Skills are lowercased before they are stored and embedded. Embeddings are
    computed outside of any database transaction.
    """

    def __init__(self, embedder: EmbeddingProvider):
        self.embedder = embedder

    def create_user(self, payload: Union[CreateUserPayload, Mapping[str, Any]]) -> User:
        """Register a new user.

        Raises:
            ValidationError: If the payload is invalid or the email is taken
            AIProviderError: If embedding the skills fails
        """
        data = parse_payload(CreateUserPayload, payload)
        email = data.email.lower()

        with get_session() as session:
            if UserRepository(session).get_by_email(email) is not None:
                raise ValidationError("User with this email already exists")

        skills = lowercase_terms(data.skills or [])
        embeddings = self.embedder.embed(skills) if skills else None

        user = User(
            id=uuid4().hex,
            first_name=data.first_name,
            last_name=data.last_name,
            username=data.username,
            email=email,
            user_type=data.user_type,
            skills=skills,
            embeddings=embeddings,
            created_at=datetime.now(timezone.utc),
        )

        try:
            with get_session() as session:
                created = UserRepository(session).add(user)
        except DataIntegrityError as e:
            raise ValidationError("User with this email already exists") from e

        with log_context(user_id=created.id):
            logger.info(
                f"User created: {created.username}",
                extra={"event": "user.created", "skill_count": len(skills)},
            )
        return created

    def list_users(self) -> List[User]:
        with get_session() as session:
            return UserRepository(session).list_all()

    def get_user(self, user_id: str) -> User:
        """Raises NotFoundError when no user has this id."""
        with get_session() as session:
            user = UserRepository(session).get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"No user with id {user_id}", entity="user", entity_id=user_id)
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            return UserRepository(session).get_by_email(email)

    def update_user(
        self, user_id: str, payload: Union[UpdateUserPayload, Mapping[str, Any]]
    ) -> User:
        """Apply a partial update.

        Skills are re-embedded only when they are part of the payload.

        Raises:
            ValidationError: If the payload is invalid or the new email is taken
            NotFoundError: If no user has this id
        """
        changes = provided_fields(parse_payload(UpdateUserPayload, payload))
        existing = self.get_user(user_id)

        if changes.get("email"):
            changes["email"] = changes["email"].lower()
            if changes["email"] != existing.email:
                other = self.find_by_email(changes["email"])
                if other is not None and other.id != user_id:
                    raise ValidationError("User with this email already exists")

        if "skills" in changes:
            changes["skills"] = lowercase_terms(changes["skills"] or [])
            changes["embeddings"] = (
                embedding_from_raw(self.embedder.embed(changes["skills"]))
                if changes["skills"]
                else None
            )

        # Explicit nulls cannot clear required fields
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key == "embeddings"
        }
        updated = existing.model_copy(update=changes)

        try:
            with get_session() as session:
                saved = UserRepository(session).update(updated)
        except DataIntegrityError as e:
            raise ValidationError("User with this email already exists") from e

        with log_context(user_id=user_id):
            logger.info(
                "User updated",
                extra={"event": "user.updated", "fields": sorted(changes)},
            )
        return saved

    def delete_user(self, user_id: str) -> User:
        """Raises NotFoundError when no user has this id."""
        self.get_user(user_id)
        with get_session() as session:
            removed = UserRepository(session).delete(user_id)
        with log_context(user_id=user_id):
            logger.info("User deleted", extra={"event": "user.deleted"})
        return removed
