"""
API routes - Sign-up and sign-in endpoints.

This module defines the HTTP endpoints:
- POST /api/signup - Register a new credential
- POST /api/signin - Verify a username/password pair

Handlers are plain `def` so FastAPI runs them on its thread pool; the
key derivation they trigger is CPU-bound and would otherwise block the
event loop.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_authentication_service, get_registration_service
from src.api.errors import INTERNAL_ERROR_MESSAGE, error_response
from src.api.models import CredentialsRequest, ErrorResponse, SigninResponse, SignupResponse
from src.domain.authentication import AuthenticationService
from src.domain.exceptions import (
    InternalError,
    InvalidCredentials,
    UsernameTaken,
    ValidationError,
)
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "username already exists"
INVALID_CREDENTIALS_MESSAGE = "invalid username or password"

router = APIRouter(tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Username or password rejected"},
        409: {"model": ErrorResponse, "description": "Username already exists"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Register a new user",
)
def signup(
    request_data: CredentialsRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SignupResponse | JSONResponse:
    """
    Register a new username/password credential.

    - **username**: at least 3 characters after trimming
    - **password**: at least 6 characters
    """
    try:
        service.register(request_data.username, request_data.password)
    except ValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, e.message)
    except UsernameTaken:
        return error_response(status.HTTP_409_CONFLICT, USERNAME_TAKEN_MESSAGE)
    except InternalError:
        logger.exception("Registration failed")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
    return SignupResponse()


@router.post(
    "/signin",
    response_model=SigninResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid username or password"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Sign in with username and password",
)
def signin(
    request_data: CredentialsRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> SigninResponse | JSONResponse:
    """
    Verify credentials.

    Unknown usernames and wrong passwords produce the identical 401 response.
    """
    try:
        username = service.authenticate(request_data.username, request_data.password)
    except InvalidCredentials:
        return error_response(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)
    except InternalError:
        logger.exception("Authentication failed")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
    return SigninResponse(username=username)
