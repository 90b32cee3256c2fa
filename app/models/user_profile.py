# app/models/user_profile.py
# 면접 연습 사용자 프로필. email 유일성은 DB 유니크 인덱스로 보장한다.
from sqlalchemy import Column, String, JSON
from app.db.base import Base, UTCDateTime, new_id, utcnow

class UserProfile(Base):
    __tablename__ = "user_profiles"
    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    target_role = Column(String(100), nullable=True)
    experience = Column(String(100), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
