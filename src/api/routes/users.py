"""User resource routes.

Endpoints:
- POST /api/users: Create a user
- GET /api/users/{id}: Get a user
- PUT /api/users/{id}: Partially update a user
- DELETE /api/users/{id}: Delete a user
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_user_repo
from api.models import MessageResponse, UserCreateRequest, UserEnvelope, UserResponse
from domain.model.errors import DomainError, NotFoundError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _to_response(user: User) -> UserResponse:
    """Convert domain User to API UserResponse."""
    return UserResponse(
        id=user.id,
        email=user.email,
        password=user.password,
        first_name=user.first_name,
        last_name=user.last_name,
        join_date=user.join_date,
    )


def _to_http_error(e: DomainError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post(
    "",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
def create_user(request: UserCreateRequest, repo: UserRepository = Depends(get_user_repo)):
    """Create a new user with email, password, first name, and last name."""
    try:
        user = user_service.create_user(
            repo,
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except DomainError as e:
        raise _to_http_error(e)

    return UserEnvelope(
        status=status.HTTP_201_CREATED,
        message=f"User created successfully with ID: {user.id}",
        data=_to_response(user),
    )


@router.get(
    "/{user_id}",
    response_model=UserEnvelope,
    responses={400: {"model": MessageResponse}, 404: {"model": MessageResponse}},
)
def get_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    """Retrieve user details by their unique ID."""
    try:
        user = user_service.get_user(repo, user_id)
    except DomainError as e:
        raise _to_http_error(e)

    return UserEnvelope(
        status=status.HTTP_200_OK,
        message="User retrieved successfully",
        data=_to_response(user),
    )


@router.put(
    "/{user_id}",
    response_model=MessageResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
    # The body is read by hand so the id is checked before it is decoded
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": {"type": "object", "additionalProperties": True},
                },
            },
        },
    },
)
async def update_user(
    user_id: str,
    request: Request,
    repo: UserRepository = Depends(get_user_repo),
):
    """Update specific fields of a user by their ID.

    Only email, firstName, lastName and password are applied; other keys are ignored.
    """
    try:
        user_service.check_user_id(user_id)
    except DomainError as e:
        raise _to_http_error(e)

    try:
        updates = await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid input")
    if not isinstance(updates, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid input")

    try:
        # bcrypt and pymongo block, keep them off the event loop
        await run_in_threadpool(user_service.update_user, repo, user_id, updates)
    except DomainError as e:
        raise _to_http_error(e)

    logger.info("User updated", extra={"userId": user_id})
    return MessageResponse(status=status.HTTP_200_OK, message="User updated successfully")


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    """Remove a user from the database using their unique ID."""
    try:
        user_service.delete_user(repo, user_id)
    except DomainError as e:
        raise _to_http_error(e)

    logger.info("User deleted", extra={"userId": user_id})
    return MessageResponse(status=status.HTTP_200_OK, message="User deleted successfully")
