import logging
import re

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from healthmap.api import deps
from healthmap.core.config import settings
from healthmap.schemas.user import ErrorResponse, RegisterRequest, RegisterResponse, User as UserSchema
from healthmap.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(request: Request, db: Session = Depends(deps.get_db)):
    """
    Create new user.

    Checks run in order and the first failure is returned: required fields,
    password length, email format. The stored email is lowercased.
    """
    try:
        body = await request.json()
        # Arrays, strings and other non-object bodies carry no fields
        fields = body if isinstance(body, dict) else {}
        if not fields.get("email") or not fields.get("password"):
            return error_response(status.HTTP_400_BAD_REQUEST, "Email and password are required")

        try:
            user_in = RegisterRequest.model_validate(fields)
        except ValidationError:
            return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

        if len(user_in.password) < settings.PASSWORD_MIN_LENGTH:
            return error_response(
                status.HTTP_400_BAD_REQUEST,
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
            )

        if not EMAIL_PATTERN.fullmatch(user_in.email):
            return error_response(status.HTTP_400_BAD_REQUEST, "Please enter a valid email address")

        # bcrypt is slow on purpose; keep it off the event loop
        result = await run_in_threadpool(
            user_service.create_user,
            db,
            email=user_in.email.lower(),
            password=user_in.password,
            name=user_in.name or "",
        )

        if not result.success:
            return error_response(status.HTTP_400_BAD_REQUEST, result.error)

        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={
                "message": "User created successfully",
                "user": UserSchema.model_validate(result.user).model_dump(),
            },
        )
    except Exception as e:
        logger.error(f"Registration error: {e}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
