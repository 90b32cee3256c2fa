from pydantic import Field
from datetime import datetime
from typing import Optional, List

from app.schemas.base import CamelModel

# -- Request --

class UserProfileCreate(CamelModel):
    name: str
    email: str
    target_role: Optional[str] = None
    experience: Optional[str] = None
    skills: List[str] = Field(default_factory=list)

# 부분 수정: 보낸 필드만 덮어쓴다 (email은 변경 불가)
class UserProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    target_role: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[List[str]] = None


# -- Response --

class UserProfileOut(CamelModel):
    id: str
    name: str
    email: str
    target_role: Optional[str] = None
    experience: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    created_at: datetime
