"""Coach API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from budget_tracker.containers import AppContainer

router = APIRouter(prefix="/coach", tags=["coach"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/clients", dependencies=[Depends(require_admin)])
async def list_clients(coach_id: UUID, request: Request) -> dict[str, object]:
    """Return a coach's clients grouped by status, with counts."""
    container: AppContainer = request.app.state.container
    today = container.clock().date()
    return container.coach_service.list_clients(coach_id, today)
