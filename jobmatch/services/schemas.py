"""Input payloads for creating and updating users and jobs.

Length limits mirror what the public API has always accepted. Update payloads
make every field optional; only the fields actually provided are applied.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic import ValidationError as PydanticValidationError

from jobmatch.domain.exceptions import ValidationError
from jobmatch.domain.models import UserType

NAME_MIN, NAME_MAX = 3, 10
TITLE_MIN, TITLE_MAX = 4, 20
DESCRIPTION_MIN, DESCRIPTION_MAX = 24, 50


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class CreateUserPayload(_Payload):
    first_name: str = Field(..., min_length=NAME_MIN, max_length=NAME_MAX)
    last_name: str = Field(..., min_length=NAME_MIN, max_length=NAME_MAX)
    username: str = Field(..., min_length=NAME_MIN, max_length=NAME_MAX)
    email: EmailStr
    user_type: UserType = UserType.CANDIDATE
    skills: Optional[List[str]] = None


class UpdateUserPayload(_Payload):
    first_name: Optional[str] = Field(None, min_length=NAME_MIN, max_length=NAME_MAX)
    last_name: Optional[str] = Field(None, min_length=NAME_MIN, max_length=NAME_MAX)
    username: Optional[str] = Field(None, min_length=NAME_MIN, max_length=NAME_MAX)
    email: Optional[EmailStr] = None
    user_type: Optional[UserType] = None
    skills: Optional[List[str]] = None


class CreateJobPayload(_Payload):
    title: str = Field(..., min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: str = Field(..., min_length=DESCRIPTION_MIN, max_length=DESCRIPTION_MAX)
    categories: List[str]
    posted_by: str = Field(..., min_length=1)
    closed_at: Optional[datetime] = None


class UpdateJobPayload(_Payload):
    title: Optional[str] = Field(None, min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: Optional[str] = Field(
        None, min_length=DESCRIPTION_MIN, max_length=DESCRIPTION_MAX
    )
    categories: Optional[List[str]] = None
    posted_by: Optional[str] = None
    closed_at: Optional[datetime] = None


PayloadT = TypeVar("PayloadT", bound=BaseModel)


def parse_payload(
    model: Type[PayloadT], payload: Union[PayloadT, Mapping[str, Any]]
) -> PayloadT:
    """Validate a mapping (or pass through an already-built payload).

    Raises:
        ValidationError: With one message per offending field
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        errors = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "payload"
            errors.append(f"{location}: {error['msg']}")
        raise ValidationError(f"Invalid {model.__name__}: {'; '.join(errors)}", errors=errors) from e


def provided_fields(payload: BaseModel) -> dict:
    """Return only the fields the caller explicitly set."""
    return payload.model_dump(exclude_unset=True)
