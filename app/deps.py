# app/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from app.config import settings
from app.db.base import SessionLocal
from app.services.generator import FallbackGenerator, QuestionFeedbackGenerator
from app.services.session_service import SessionLifecycleManager
from app.services.user_profile_service import UserProfileManager

# ----------------------------
# DB 세션 (요청 단위)
# ----------------------------
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()  # commit 포함
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

# ----------------------------
# 질문/피드백 생성기
#  - lifespan에서 만든 인스턴스를 app.state에서 꺼낸다
# ----------------------------
def get_generator(request: Request) -> QuestionFeedbackGenerator:
    generator = getattr(request.app.state, "generator", None)
    if generator is None:
        return FallbackGenerator()
    return generator

# ----------------------------
# 서비스 객체
# ----------------------------
def get_session_manager(
    db: Session = Depends(get_db),
    generator: QuestionFeedbackGenerator = Depends(get_generator),
) -> SessionLifecycleManager:
    return SessionLifecycleManager(
        db,
        generator,
        lock_scored=settings.lock_scored_sessions,
        require_existing_user=settings.require_existing_user,
    )

def get_user_manager(db: Session = Depends(get_db)) -> UserProfileManager:
    return UserProfileManager(db)
