"""API routes for directory users."""
from fastapi import APIRouter, Depends, Request, status

from app.api.routes.dependencies import get_list_options, get_user_service, respond
from app.schemas.base import APIResponse
from app.schemas.filtering import ListOptions
from app.schemas.users import UserCreate, UserDTO, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=APIResponse[UserDTO], status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
):
    return respond(request, await service.create(payload))


@router.get("", response_model=APIResponse[list[UserDTO]])
async def list_users(
    request: Request,
    opts: ListOptions = Depends(get_list_options),
    service: UserService = Depends(get_user_service),
):
    return respond(request, page=await service.list(opts))


@router.get("/count", response_model=APIResponse[int])
async def count_users(
    request: Request,
    opts: ListOptions = Depends(get_list_options),
    service: UserService = Depends(get_user_service),
):
    return respond(request, await service.count(opts.filters))


@router.get("/email/{email}", response_model=APIResponse[UserDTO])
async def get_user_by_email(
    request: Request,
    email: str,
    service: UserService = Depends(get_user_service),
):
    return respond(request, await service.get_by_email(email))


@router.get("/{user_id}", response_model=APIResponse[UserDTO])
async def get_user(
    request: Request,
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    return respond(request, await service.get(user_id))


@router.put("/{user_id}", response_model=APIResponse[UserDTO])
async def update_user(
    request: Request,
    user_id: str,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    return respond(request, await service.update(payload.model_copy(update={"id": user_id})))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    await service.delete(user_id)
