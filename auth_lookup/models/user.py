"""
User model — the login identity.

A User row holds an email and the bcrypt output for its password. Rows are
created once by registration; this service never updates or deletes them.

Columns:
  - id: assigned by the database (autoincrement), immutable
  - email: UNIQUE. The constraint is the only duplicate check; registration
    does not look before it inserts, so two concurrent signups for the same
    email resolve inside the database and exactly one of them wins.
  - password_hash: bcrypt hash of the password (never the plaintext)
  - salt: the bcrypt salt used for password_hash, kept in its own column
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from auth_lookup.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    salt: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    def __repr__(self) -> str:
        # Never include the hash or salt in debug output
        return f"<User id={self.id} email={self.email!r}>"
