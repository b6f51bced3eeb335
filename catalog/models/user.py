"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, func, true
from sqlalchemy.orm import relationship

from catalog.core.roles import Role
from catalog.core.security import PASSWORD_MIN_LEN, hash_password, verify_password
from catalog.models.base import Base


def _role_values(enum_cls: type[Role]) -> list[str]:
    return [member.value for member in enum_cls]


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    The plain password is write-only: assigning ``password`` stores a bcrypt
    hash in ``password_hash`` and the plain value is never kept.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=32,
            create_constraint=True,
            values_callable=_role_values,
        ),
        nullable=False,
        default=Role.CLIENT,
    )
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    services = relationship("Service", back_populates="owner")

    @property
    def password(self) -> str:
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plain_password: str) -> None:
        if not plain_password or len(plain_password) < PASSWORD_MIN_LEN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
        self.password_hash = hash_password(plain_password)

    def verify_password(self, plain_password: str | None) -> bool:
        return verify_password(plain_password, self.password_hash)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"
