"""
공용 DB 베이스/세션 팩토리.
SessionLocal, engine, Base 정의는 app.db.session 한 곳에서 관리한다.
모델 공용 기본값(id, 시각) 헬퍼와 UTC 시각 컬럼 타입도 여기서 제공한다.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy.types import DateTime, TypeDecorator

from app.db.session import engine, SessionLocal, Base


def new_id() -> str:
    # Mongo ObjectId 대신 불투명한 uuid4 hex 문자열 사용
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    항상 UTC aware datetime으로 저장/조회.
    sqlite는 offset을 버리므로 읽을 때 tzinfo=UTC를 다시 붙인다.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


__all__ = ["engine", "SessionLocal", "Base", "new_id", "utcnow", "UTCDateTime"]
