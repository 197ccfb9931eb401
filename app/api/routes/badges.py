"""API routes for achievement badges."""
from fastapi import APIRouter, Depends, Request, status

from app.api.routes.dependencies import get_badge_service, get_list_options, respond
from app.schemas.badges import BadgeCreate, BadgeDTO, BadgeUpdate
from app.schemas.base import APIResponse
from app.schemas.filtering import ListOptions
from app.services.badge_service import BadgeService

router = APIRouter(prefix="/badges", tags=["badges"])


@router.post("", response_model=APIResponse[BadgeDTO], status_code=status.HTTP_201_CREATED)
async def create_badge(
    request: Request,
    payload: BadgeCreate,
    service: BadgeService = Depends(get_badge_service),
):
    return respond(request, await service.create(payload))


@router.post("/bulk", response_model=APIResponse[list[BadgeDTO]], status_code=status.HTTP_201_CREATED)
async def bulk_create_badges(
    request: Request,
    payloads: list[BadgeCreate],
    service: BadgeService = Depends(get_badge_service),
):
    return respond(request, await service.bulk_create(payloads))


@router.get("", response_model=APIResponse[list[BadgeDTO]])
async def list_badges(
    request: Request,
    opts: ListOptions = Depends(get_list_options),
    service: BadgeService = Depends(get_badge_service),
):
    return respond(request, page=await service.list(opts))


@router.get("/name/{name}", response_model=APIResponse[BadgeDTO])
async def get_badge_by_name(
    request: Request,
    name: str,
    service: BadgeService = Depends(get_badge_service),
):
    return respond(request, await service.get_by_name(name))


@router.get("/{badge_id}", response_model=APIResponse[BadgeDTO])
async def get_badge(
    request: Request,
    badge_id: str,
    service: BadgeService = Depends(get_badge_service),
):
    return respond(request, await service.get(badge_id))


@router.put("/{badge_id}", response_model=APIResponse[BadgeDTO])
async def update_badge(
    request: Request,
    badge_id: str,
    payload: BadgeUpdate,
    service: BadgeService = Depends(get_badge_service),
):
    return respond(request, await service.update(payload.model_copy(update={"id": badge_id})))


@router.delete("/{badge_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_badge(
    badge_id: str,
    service: BadgeService = Depends(get_badge_service),
):
    await service.delete(badge_id)
