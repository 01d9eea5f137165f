# recruitment_api/schemas.py
import math
from typing import Any, Dict, Optional, Type, TypeVar

import pydantic
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator

from recruitment_api.errors import ValidationError, errors_from_pydantic

NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
# bcrypt ignores everything past 72 bytes
PASSWORD_MAX_BYTES = 72

ModelT = TypeVar("ModelT", bound=BaseModel)


def _check_email(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Please include a valid email")
    email = value.strip()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please include a valid email")
    return email


class RegisterIn(BaseModel):
    model_config = ConfigDict(validate_default=True)

    name: Any = None
    email: Any = None
    password: Any = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Name is required")
        v = v.strip()
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError(f"Name cannot be more than {NAME_MAX_LENGTH} characters")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if not isinstance(v, str) or len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password cannot be more than {PASSWORD_MAX_BYTES} bytes")
        return v


class LoginIn(BaseModel):
    model_config = ConfigDict(validate_default=True)

    email: Any = None
    password: Any = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if not isinstance(v, str) or not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdate(BaseModel):
    """Partial profile update. Absent (or null) fields are left untouched."""

    name: Optional[Any] = None
    skills: Optional[Any] = None
    experience: Optional[Any] = None
    education: Optional[Any] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Name is required")
        v = v.strip()
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError(f"Name cannot be more than {NAME_MAX_LENGTH} characters")
        return v

    @field_validator("skills")
    @classmethod
    def check_skills(cls, v):
        if v is None:
            return v
        if not isinstance(v, list) or not all(isinstance(skill, str) for skill in v):
            raise ValueError("Skills must be an array of strings")
        return list(v)

    @field_validator("experience")
    @classmethod
    def check_experience(cls, v):
        if v is None:
            return v
        # bool is an int subclass but not a number here
        if isinstance(v, bool):
            raise ValueError("Experience must be a number")
        if not isinstance(v, (str, int, float)):
            raise ValueError("Experience must be a number")
        try:
            v = float(v.strip() if isinstance(v, str) else v)
        except (OverflowError, ValueError):
            # huge JSON integers do not fit in a float
            raise ValueError("Experience must be a number")
        if not math.isfinite(v):
            raise ValueError("Experience must be a number")
        if v < 0:
            raise ValueError("Experience cannot be negative")
        return v

    @field_validator("education")
    @classmethod
    def check_education(cls, v):
        if v is not None and not isinstance(v, str):
            raise ValueError("Education must be a string")
        return v

    def changes(self) -> Dict[str, Any]:
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


def validate_payload(model_cls: Type[ModelT], data: Any) -> ModelT:
    """Validate raw input into ``model_cls``, raising our ValidationError on failure."""
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(errors_from_pydantic(exc.errors())) from exc


def public_user(user) -> Dict[str, Any]:
    """Serialize a User for responses. The password hash never leaves the server."""
    return {
        "_id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": getattr(user.role, "value", user.role),
        "skills": list(user.skills or []),
        "experience": user.experience,
        "education": user.education,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
    }
