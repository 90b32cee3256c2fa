# app/routers/user_profile.py

from fastapi import APIRouter, Depends

from app.deps import get_user_manager
from app.schemas.session import MessageResponse
from app.schemas.user_profile import UserProfileCreate, UserProfileUpdate, UserProfileOut
from app.services.user_profile_service import UserProfileManager

router = APIRouter(prefix="/api/users", tags=["users"])


# ---- 프로필 생성 ----

@router.post("", response_model=UserProfileOut, status_code=201)
def create_profile(
    payload: UserProfileCreate,
    manager: UserProfileManager = Depends(get_user_manager),
):
    prof = manager.create(payload.model_dump())
    return UserProfileOut.model_validate(prof)


# ---- email로 조회 (로그인 화면) ----

@router.get("/{email}", response_model=UserProfileOut)
def get_profile_by_email(
    email: str,
    manager: UserProfileManager = Depends(get_user_manager),
):
    return UserProfileOut.model_validate(manager.fetch_by_email(email))


# ---- 프로필 수정 (보낸 필드만 반영) ----

@router.put("/{user_id}", response_model=UserProfileOut)
def update_profile(
    user_id: str,
    payload: UserProfileUpdate,
    manager: UserProfileManager = Depends(get_user_manager),
):
    prof = manager.update(user_id, payload.model_dump(exclude_unset=True))
    return UserProfileOut.model_validate(prof)


# ---- 프로필 삭제 (세션은 남겨둠) ----

@router.delete("/{user_id}", response_model=MessageResponse)
def delete_profile(
    user_id: str,
    manager: UserProfileManager = Depends(get_user_manager),
):
    manager.delete(user_id)
    return MessageResponse(message="User deleted successfully")
