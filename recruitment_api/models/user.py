# recruitment_api/models/user.py
import enum
import uuid
from datetime import datetime, timezone

import sqlalchemy as sa

from recruitment_api.utils.database import Base


class Role(str, enum.Enum):
    USER = "user"
    RECRUITER = "recruiter"
    ADMIN = "admin"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(sa.types.TypeDecorator):
    """Timezone-aware datetime; backends that drop the offset (SQLite) are read back as UTC."""

    impl = sa.DateTime
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class User(Base):
    __tablename__ = "users"
    id = sa.Column(sa.Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = sa.Column(sa.String(50), nullable=False)
    email = sa.Column(sa.String(255), unique=True, nullable=False, index=True)
    # bcrypt digest, salt included; the plaintext is never stored
    password_hash = sa.Column(sa.String(128), nullable=False)
    role = sa.Column(
        sa.Enum(Role, name="user_role", native_enum=False, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    )
    skills = sa.Column(sa.JSON, nullable=False, default=list)
    experience = sa.Column(sa.Float, nullable=False, default=0)
    education = sa.Column(sa.Text, nullable=False, default="")
    created_at = sa.Column(UTCDateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = sa.Column(UTCDateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
