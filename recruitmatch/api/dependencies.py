"""
FastAPI dependencies for the RecruitMatch API.

The authentication gateway in front of this service resolves the session
and forwards the caller's id and role in the ``X-User-Id`` and
``X-User-Role`` headers.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from recruitmatch.core.exceptions import Forbidden
from recruitmatch.core.matching import AutoMatchOrchestrator, MatchService
from recruitmatch.core.principal import Principal
from recruitmatch.utils.constants import UserRole


def get_match_service() -> MatchService:
    return MatchService()


def get_auto_match_orchestrator(
    service: MatchService = Depends(get_match_service),
) -> AutoMatchOrchestrator:
    return AutoMatchOrchestrator(service=service)


async def get_principal(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Principal:
    """Resolve the caller from gateway headers."""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        role = UserRole(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=403, detail="Unknown role")
    return Principal(user_id=x_user_id.strip(), role=role)


async def require_staff(principal: Principal = Depends(get_principal)) -> Principal:
    """Allow only consultants and admins."""
    if not principal.is_staff:
        raise Forbidden("Access denied")
    return principal
