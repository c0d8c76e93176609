"""FastAPI application that exposes the user administration endpoints."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import Settings, load_settings
from .errors import ConflictError, NotFoundError, ValidationError
from .models import User, UserStatus
from .query import MAX_PAGE_SIZE, UserPage, UserQuery
from .seed import build_store
from .store import UserStore

logger = logging.getLogger("useradmin.api")

_NULLABLE_FIELDS = frozenset({"last_login"})


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    role: str
    status: str
    last_login: Optional[str] = Field(default=None, alias="lastLogin")
    date_joined: str = Field(..., alias="dateJoined")


class UsersPageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: List[UserResponse]
    total: int
    page: int
    page_size: int = Field(..., alias="pageSize")
    total_pages: int = Field(..., alias="totalPages")


class UserCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    role: str = Field(..., min_length=1, max_length=32)
    status: UserStatus
    last_login: Optional[str] = Field(default=None, alias="lastLogin", max_length=64)
    date_joined: str = Field(..., alias="dateJoined", min_length=1, max_length=64)


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    role: Optional[str] = Field(default=None, min_length=1, max_length=32)
    status: Optional[UserStatus] = None
    last_login: Optional[str] = Field(default=None, alias="lastLogin", max_length=64)
    date_joined: Optional[str] = Field(default=None, alias="dateJoined", min_length=1, max_length=64)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):  # type: ignore[override]
        for field_name in self.model_fields_set:
            if field_name in _NULLABLE_FIELDS:
                continue
            if getattr(self, field_name) is None:
                raise ValueError(f"{field_name} must not be null")
        return self


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        status=user.status.value,
        last_login=user.last_login,
        date_joined=user.date_joined,
    )


def page_to_response(page: UserPage) -> UsersPageResponse:
    return UsersPageResponse(
        users=[user_to_response(user) for user in page.users],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
    )


def _json_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    locations = {error["loc"][0] for error in exc.errors() if error.get("loc")}
    if "path" in locations:
        message = "Invalid user ID"
    elif "query" in locations:
        message = "Invalid query parameters"
    else:
        message = "Invalid user data"
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _json_error(status.HTTP_400_BAD_REQUEST, message)


def register_user_routes(app: FastAPI, store: UserStore) -> None:
    """Expose the user list and CRUD endpoints on the provided application."""

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, Any]:
        return {"status": "ok", "users": len(store)}

    @app.get("/api/users", response_model=UsersPageResponse)
    async def list_users(
        search: Optional[str] = Query(default=None),
        status_filter: Optional[str] = Query(default=None, alias="status"),
        role: Optional[str] = Query(default=None),
        page: Optional[int] = Query(default=None, ge=1),
        page_size: Optional[int] = Query(default=None, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    ):
        try:
            query = UserQuery.from_params(
                search=search,
                status=status_filter,
                role=role,
                page=page,
                page_size=page_size,
            )
        except ValidationError as exc:
            return _json_error(status.HTTP_400_BAD_REQUEST, str(exc))

        return page_to_response(store.query(query))

    @app.get("/api/users/{user_id}", response_model=UserResponse)
    async def get_user(user_id: int):
        user = store.get(user_id)
        if user is None:
            return _json_error(status.HTTP_404_NOT_FOUND, "User not found")
        return user_to_response(user)

    @app.post(
        "/api/users",
        status_code=status.HTTP_201_CREATED,
        response_model=UserResponse,
    )
    async def create_user(payload: UserCreateRequest):
        try:
            user = store.insert(**payload.model_dump())
        except ConflictError as exc:
            return _json_error(status.HTTP_409_CONFLICT, str(exc))
        except ValidationError as exc:
            return _json_error(status.HTTP_400_BAD_REQUEST, str(exc))
        return user_to_response(user)

    @app.put("/api/users/{user_id}", response_model=UserResponse)
    async def update_user(user_id: int, payload: UserUpdateRequest):
        try:
            user = store.update(user_id, payload.model_dump(exclude_unset=True))
        except ConflictError as exc:
            return _json_error(status.HTTP_409_CONFLICT, str(exc))
        except NotFoundError as exc:
            return _json_error(status.HTTP_404_NOT_FOUND, str(exc))
        except ValidationError as exc:
            return _json_error(status.HTTP_400_BAD_REQUEST, str(exc))
        return user_to_response(user)

    @app.delete(
        "/api/users/{user_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
    )
    async def delete_user(user_id: int) -> Response:
        if not store.delete(user_id):
            return _json_error(status.HTTP_404_NOT_FOUND, "User not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(
    *,
    store: UserStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Instantiate the FastAPI application around a single user store."""

    app_settings = settings or load_settings()
    user_store = store if store is not None else build_store(app_settings)

    app = FastAPI(
        title="User Administration API",
        version="0.1.0",
        description="Searchable, filterable and paginated user list with CRUD endpoints.",
    )
    app.state.settings = app_settings
    app.state.store = user_store

    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    register_user_routes(app, user_store)

    logger.info("User administration API ready with %d user(s)", len(user_store))
    return app


__all__ = [
    "UserCreateRequest",
    "UserResponse",
    "UserUpdateRequest",
    "UsersPageResponse",
    "create_app",
    "page_to_response",
    "register_user_routes",
    "user_to_response",
]
