"""Tests for user registration and profile updates."""

import pytest

from jobmatch.domain.exceptions import NotFoundError, ValidationError
from jobmatch.domain.models import MultiEmbedding, UserType
from jobmatch.services import CreateUserPayload, UserService


@pytest.fixture
def service(database, fake_embedder):
    return UserService(fake_embedder)


def _payload(**overrides):
    fields = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "username": "ada",
        "email": "Ada@Example.com",
        "skills": ["Python", " Backend "],
    }
    fields.update(overrides)
    return fields


class TestCreateUser:
    def test_creates_user_with_embeddings(self, service, fake_embedder):
        user = service.create_user(_payload())

        assert len(user.id) == 32
        assert user.email == "ada@example.com"
        assert user.skills == ["python", "backend"]
        assert user.user_type == UserType.CANDIDATE
        assert fake_embedder.calls == [["python", "backend"]]
        assert isinstance(user.embeddings, MultiEmbedding)
        assert user.embeddings.vectors == [(1.0, 0.0, 0.0), (0.9, 0.1, 0.0)]

    def test_user_is_persisted(self, service):
        created = service.create_user(_payload())
        assert service.get_user(created.id) == created
        assert service.find_by_email("ADA@example.com").id == created.id

    def test_without_skills_skips_embedding(self, service, fake_embedder):
        user = service.create_user(_payload(skills=None))

        assert user.skills == []
        assert user.embeddings is None
        assert fake_embedder.calls == []

    def test_accepts_payload_instance(self, service):
        payload = CreateUserPayload(**_payload(user_type="employer"))
        assert service.create_user(payload).user_type == UserType.EMPLOYER

    def test_duplicate_email_rejected_before_embedding(self, service, fake_embedder):
        service.create_user(_payload())
        fake_embedder.calls.clear()

        with pytest.raises(ValidationError, match="already exists"):
            service.create_user(_payload(email="ADA@example.com", username="ada2"))

        assert fake_embedder.calls == []

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"first_name": "Al"}, "first_name"),
            ({"last_name": "Wolfeschlegel"}, "last_name"),
            ({"username": "x"}, "username"),
            ({"email": "not-an-email"}, "email"),
            ({"user_type": "admin"}, "user_type"),
            ({"nickname": "ace"}, "nickname"),
        ],
    )
    def test_invalid_payload(self, service, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            service.create_user(_payload(**overrides))

        assert any(message.startswith(field) for message in exc_info.value.errors)

    def test_missing_required_field(self, service):
        payload = _payload()
        del payload["email"]
        with pytest.raises(ValidationError, match="email"):
            service.create_user(payload)


class TestReadUsers:
    def test_get_missing_user(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.get_user("missing")
        assert exc_info.value.entity == "user"

    def test_list_users(self, service):
        service.create_user(_payload())
        service.create_user(_payload(email="grace@example.com", username="grace"))

        assert {u.username for u in service.list_users()} == {"ada", "grace"}


class TestUpdateUser:
    def test_partial_update_keeps_embeddings(self, service, fake_embedder):
        user = service.create_user(_payload())
        fake_embedder.calls.clear()

        updated = service.update_user(user.id, {"first_name": "Augusta"})

        assert updated.first_name == "Augusta"
        assert updated.embeddings == user.embeddings
        assert fake_embedder.calls == []

    def test_new_skills_are_re_embedded(self, service, fake_embedder):
        user = service.create_user(_payload())

        updated = service.update_user(user.id, {"skills": ["Design"]})

        assert updated.skills == ["design"]
        assert fake_embedder.calls[-1] == ["design"]
        assert updated.embeddings.vectors == [(0.0, 1.0, 0.0)]

    def test_clearing_skills_clears_embeddings(self, service):
        user = service.create_user(_payload())

        updated = service.update_user(user.id, {"skills": []})

        assert updated.skills == []
        assert updated.embeddings is None
        assert service.get_user(user.id).embeddings is None

    def test_null_does_not_clear_required_field(self, service):
        user = service.create_user(_payload())
        updated = service.update_user(user.id, {"last_name": None})
        assert updated.last_name == "Lovelace"

    def test_email_collision_rejected(self, service):
        service.create_user(_payload())
        other = service.create_user(_payload(email="grace@example.com", username="grace"))

        with pytest.raises(ValidationError, match="already exists"):
            service.update_user(other.id, {"email": "ada@example.com"})

    def test_same_email_different_case_allowed(self, service):
        user = service.create_user(_payload())
        assert service.update_user(user.id, {"email": "ADA@example.com"}).email == "ada@example.com"

    def test_update_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.update_user("missing", {"first_name": "Augusta"})

    def test_invalid_update_payload(self, service):
        user = service.create_user(_payload())
        with pytest.raises(ValidationError):
            service.update_user(user.id, {"username": "no"})


def test_delete_user(service):
    user = service.create_user(_payload())

    removed = service.delete_user(user.id)

    assert removed.id == user.id
    with pytest.raises(NotFoundError):
        service.get_user(user.id)


def test_delete_missing_user(service):
    with pytest.raises(NotFoundError):
        service.delete_user("missing")
