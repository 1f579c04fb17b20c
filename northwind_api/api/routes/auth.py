from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from northwind_api.auth_local import create_access_token
from northwind_api.core.logging_config import get_logger
from northwind_api.core_settings import get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class TokenRequest(BaseModel):
    username: str = Field(min_length=1)
    scopes: list[str] = []
    roles: list[str] = []


@router.post("/token")
def issue_token(payload: TokenRequest):
    """Local token issuer for development and tests; not available in other environments."""
    settings = get_settings()
    if not settings.is_development:
        raise HTTPException(status_code=404)
    logger.info(
        "Issued development credentials",
        extra={'extra_fields': {'subject': payload.username, 'scopes': payload.scopes, 'roles': payload.roles}}
    )
    token = create_access_token(payload.username, payload.scopes, payload.roles)
    return {"access_token": token, "token_type": "bearer", "expires_in": settings.JWT_EXPIRES_MINUTES * 60}
