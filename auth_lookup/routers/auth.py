"""
Authentication router — registration and login endpoints.

Endpoints:
  POST /register  — Create a user from an email and password
  POST /login     — Check an email and password

Neither endpoint issues a session or token; login only reports success.

Security audit notes:
  - Plaintext passwords exist only in memory during request processing;
    they are hashed before any database operation and never logged.
  - SQLAlchemy's echo mode (DEBUG=True) logs SQL statements with bound
    parameters, which include the bcrypt hash and salt but never the
    plaintext. Keep DEBUG off in production.
  - A missing or null body is treated like an empty object, so it gets
    the same "Email and password are required." answer as absent fields.
  - No request body logging middleware is installed, so POST bodies
    containing passwords are not written to any log file.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth_lookup.database import get_db
from auth_lookup.schemas.auth import CredentialsRequest, MessageResponse, RegisterResponse
from auth_lookup.services import auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: CredentialsRequest | None = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new user.

    - **email**: Required, must not already be registered (409 otherwise)
    - **password**: Required
    """
    credentials = request if request is not None else CredentialsRequest()
    user_id = await auth_service.register(
        db=db,
        email=credentials.email,
        password=credentials.password,
    )

    return RegisterResponse(message="User registered successfully!", user_id=user_id)


@router.post(
    "/login",
    response_model=MessageResponse,
    summary="Check email and password",
)
async def login(
    request: CredentialsRequest | None = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with email and password.

    Unknown email and wrong password both return 401 with the same body.
    """
    credentials = request if request is not None else CredentialsRequest()
    await auth_service.login(
        db=db,
        email=credentials.email,
        password=credentials.password,
    )

    return MessageResponse(message="Login successful!")
