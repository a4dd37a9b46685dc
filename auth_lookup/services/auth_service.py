"""
Authentication service — registration and login business logic.

This module contains the auth logic, separated from HTTP concerns. The router
calls these functions and the exception handlers translate the domain errors
they raise into HTTP responses, so everything here is testable without a
web server.

Registration flow:
  1. Reject a missing email or password (no database access)
  2. Generate a salt and hash the password with bcrypt
  3. INSERT the user; insert_user() reports CREATED or DUPLICATE
  4. Map DUPLICATE to ConflictError

Login flow:
  1. Reject a missing email or password (no database access)
  2. Look up the user by email
  3. Verify the password against the stored bcrypt hash

Security notes:
  - There is no "does this email exist?" query before the INSERT. The unique
    constraint on users.email is the single source of truth, which also
    settles concurrent registrations for the same email.
  - Login raises the same AuthError for "email not found" and "wrong
    password" to prevent user enumeration.
  - bcrypt is CPU-bound, so it runs in a worker thread to keep the event
    loop serving other requests.
  - Passwords, hashes and salts are never logged.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth_lookup.exceptions import AuthError, ConflictError, InternalError, ValidationError
from auth_lookup.models.user import User
from auth_lookup.security import generate_salt, hash_password, verify_password

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_ERRORS = ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY")

# Errors that mean "the database call failed", as opposed to a bug in our code
DATABASE_ERRORS = (SQLAlchemyError, OSError)


class InsertStatus(str, enum.Enum):
    CREATED = "created"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class UserInsertResult:
    """Outcome of insert_user(). user_id is set only when status is CREATED."""
    status: InsertStatus
    user_id: int | None = None


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True if ``exc`` was caused by a UNIQUE constraint.

    PostgreSQL drivers expose the SQLSTATE code; sqlite3 exposes an error name
    (Python 3.11+) and otherwise only the message text.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    error_name = getattr(orig, "sqlite_errorname", None)
    if error_name is not None:
        return error_name in SQLITE_UNIQUE_ERRORS
    return "UNIQUE constraint failed" in str(orig)


def require_credentials(email: str | None, password: str | None) -> None:
    """Raise ValidationError unless both fields are present and non-empty."""
    if not email or not password:
        raise ValidationError("Email and password are required.")


async def insert_user(
    db: AsyncSession,
    email: str,
    password_hash: str,
    salt: str,
) -> UserInsertResult:
    """
    INSERT a user row and commit.

    A unique-constraint violation is reported as InsertStatus.DUPLICATE
    rather than raised. Any other database error propagates.
    """
    user = User(email=email, password_hash=password_hash, salt=salt)
    db.add(user)
    try:
        # Flush so the constraint fires here and user.id is assigned
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        if is_unique_violation(exc):
            return UserInsertResult(status=InsertStatus.DUPLICATE)
        raise

    await db.commit()
    return UserInsertResult(status=InsertStatus.CREATED, user_id=user.id)


async def register(db: AsyncSession, email: str | None, password: str | None) -> int:
    """
    Register a new user.

    Args:
        db: Database session.
        email: Account email (uniqueness enforced by the database).
        password: Plaintext password (hashed before storage).

    Returns:
        The new user's id.

    Raises:
        ValidationError: email or password missing.
        ConflictError: the email is already registered.
        InternalError: the database call failed.
    """
    require_credentials(email, password)

    salt = generate_salt()
    password_hash = await asyncio.to_thread(hash_password, password, salt)

    try:
        result = await insert_user(db, email=email, password_hash=password_hash, salt=salt)
    except DATABASE_ERRORS as exc:
        logger.exception("Error during registration")
        raise InternalError("Internal server error during registration.") from exc

    if result.status == InsertStatus.DUPLICATE:
        logger.info("Registration rejected: email already exists")
        raise ConflictError("Email already exists. Please use a different email.")

    logger.info("Registered user id=%s", result.user_id)
    return result.user_id


async def login(db: AsyncSession, email: str | None, password: str | None) -> User:
    """
    Check an email/password pair.

    No session or token is created; a successful return is the whole result.

    Raises:
        ValidationError: email or password missing.
        AuthError: unknown email or wrong password (indistinguishable).
        InternalError: the database call failed.
    """
    require_credentials(email, password)

    try:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalars().first()
    except DATABASE_ERRORS as exc:
        logger.exception("Error during login")
        raise InternalError("Internal server error during login.") from exc

    if user is None:
        raise AuthError()

    if not await asyncio.to_thread(verify_password, password, user.password_hash):
        raise AuthError()

    return user
