"""API routes for badge grants."""
from fastapi import APIRouter, Depends, Request, status

from app.api.routes.dependencies import get_list_options, get_user_badge_service, respond
from app.schemas.base import APIResponse
from app.schemas.filtering import ListOptions
from app.schemas.user_badges import UserBadgeCreate, UserBadgeDTO
from app.services.user_badge_service import UserBadgeService

router = APIRouter(prefix="/user-badges", tags=["user-badges"])


@router.post("", response_model=APIResponse[UserBadgeDTO], status_code=status.HTTP_201_CREATED)
async def grant_badge(
    request: Request,
    payload: UserBadgeCreate,
    service: UserBadgeService = Depends(get_user_badge_service),
):
    return respond(request, await service.grant(payload))


@router.get("", response_model=APIResponse[list[UserBadgeDTO]])
async def list_grants(
    request: Request,
    opts: ListOptions = Depends(get_list_options),
    service: UserBadgeService = Depends(get_user_badge_service),
):
    return respond(request, page=await service.list(opts))


@router.get("/user/{user_id}", response_model=APIResponse[list[UserBadgeDTO]])
async def list_grants_for_user(
    request: Request,
    user_id: str,
    service: UserBadgeService = Depends(get_user_badge_service),
):
    return respond(request, await service.list_for_user(user_id))


@router.get("/badge/{badge_id}", response_model=APIResponse[list[UserBadgeDTO]])
async def list_grants_for_badge(
    request: Request,
    badge_id: str,
    service: UserBadgeService = Depends(get_user_badge_service),
):
    return respond(request, await service.list_for_badge(badge_id))


@router.get("/{grant_id}", response_model=APIResponse[UserBadgeDTO])
async def get_grant(
    request: Request,
    grant_id: str,
    service: UserBadgeService = Depends(get_user_badge_service),
):
    return respond(request, await service.get(grant_id))


@router.delete("/{grant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_grant(
    grant_id: str,
    service: UserBadgeService = Depends(get_user_badge_service),
):
    await service.revoke(grant_id)
