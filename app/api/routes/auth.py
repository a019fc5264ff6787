from __future__ import annotations

from fastapi import APIRouter

from app.api.dependencies import Container
from app.schemas.users import LoginRequest, UserToken

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=UserToken)
def login(payload: LoginRequest, container: Container) -> UserToken:
    """Exchange username and password for an access token.

    Unknown usernames and wrong passwords produce the same 401 response.
    """
    return container.auth.login(payload.username, payload.password)
