"""API routes for user profiles, including avatar and identity uploads."""
from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from app.api.routes.dependencies import get_list_options, get_profile_service, respond
from app.schemas.base import APIResponse
from app.schemas.filtering import ListOptions
from app.schemas.profiles import ProfileCreate, ProfileDTO, ProfileImageUpload, ProfileUpdate
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


async def _read_upload(profile_id: str, file: UploadFile) -> ProfileImageUpload:
    return ProfileImageUpload(
        id=profile_id,
        filename=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        content=await file.read(),
    )


@router.post("", response_model=APIResponse[ProfileDTO], status_code=status.HTTP_201_CREATED)
async def create_profile(
    request: Request,
    payload: ProfileCreate,
    service: ProfileService = Depends(get_profile_service),
):
    """Create a profile; the user's first profile earns the explorer badge."""
    return respond(request, await service.create(payload))


@router.get("", response_model=APIResponse[list[ProfileDTO]])
async def list_profiles(
    request: Request,
    opts: ListOptions = Depends(get_list_options),
    service: ProfileService = Depends(get_profile_service),
):
    return respond(request, page=await service.list(opts))


@router.get("/fullname/{fullname}", response_model=APIResponse[list[ProfileDTO]])
async def find_profiles_by_fullname(
    request: Request,
    fullname: str,
    service: ProfileService = Depends(get_profile_service),
):
    return respond(request, await service.find_by_fullname(fullname))


@router.get("/user/{user_id}", response_model=APIResponse[ProfileDTO])
async def get_profile_by_user(
    request: Request,
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
):
    return respond(request, await service.get_by_user_id(user_id))


@router.get("/{profile_id}", response_model=APIResponse[ProfileDTO])
async def get_profile(
    request: Request,
    profile_id: str,
    service: ProfileService = Depends(get_profile_service),
):
    return respond(request, await service.get(profile_id))


@router.put("/{profile_id}", response_model=APIResponse[ProfileDTO])
async def update_profile(
    request: Request,
    profile_id: str,
    payload: ProfileUpdate,
    service: ProfileService = Depends(get_profile_service),
):
    return respond(request, await service.update(payload.model_copy(update={"id": profile_id})))


@router.post("/{profile_id}/avatar", response_model=APIResponse[ProfileDTO])
async def upload_avatar(
    request: Request,
    profile_id: str,
    file: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service),
):
    return respond(request, await service.update_avatar(await _read_upload(profile_id, file)))


@router.post("/{profile_id}/identity", response_model=APIResponse[ProfileDTO])
async def verify_identity(
    request: Request,
    profile_id: str,
    file: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service),
):
    """Store an identity document; verification earns the verified-locale badge."""
    return respond(request, await service.verify_identity(await _read_upload(profile_id, file)))


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    profile_id: str,
    service: ProfileService = Depends(get_profile_service),
):
    await service.delete(profile_id)
