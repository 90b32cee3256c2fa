# app/services/user_profile_service.py

import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import STORE_ERROR_MESSAGE, ConflictError, NotFoundError, StoreError, ValidationError
from app.models.user_profile import UserProfile

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "target_role", "experience", "skills")


class UserProfileManager:

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, prof: UserProfile | None = None) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # email 유니크 인덱스 위반
            raise ConflictError("Email already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("[USER] store failure")
            raise StoreError(STORE_ERROR_MESSAGE) from e

        if prof is not None:
            self.db.refresh(prof)

    def create(self, fields: Dict[str, Any]) -> UserProfile:
        name = (fields.get("name") or "").strip()
        email = (fields.get("email") or "").strip()
        if not name or not email:
            raise ValidationError("name and email are required")

        prof = UserProfile(
            name=name,
            email=email,
            target_role=fields.get("target_role"),
            experience=fields.get("experience"),
            skills=list(fields.get("skills") or []),
        )
        self.db.add(prof)
        self._commit(prof)

        logger.info("[USER] created id=%s", prof.id)
        return prof

    def get(self, user_id: str) -> UserProfile:
        prof = self.db.get(UserProfile, user_id)
        if prof is None:
            raise NotFoundError("User not found")
        return prof

    def fetch_by_email(self, email: str) -> UserProfile:
        prof = (
            self.db.query(UserProfile)
            .filter(UserProfile.email == email)
            .first()
        )
        if prof is None:
            raise NotFoundError("User not found")
        return prof

    def update(self, user_id: str, partial: Dict[str, Any]) -> UserProfile:
        """보낸 필드만 덮어쓰는 shallow merge. email 변경은 허용하지 않는다."""
        prof = self.get(user_id)

        email = partial.get("email")
        if email is not None and email != prof.email:
            raise ValidationError("email cannot be changed")

        if "name" in partial and not (partial["name"] or "").strip():
            raise ValidationError("name is required")

        for field in UPDATABLE_FIELDS:
            if field == "email" or field not in partial:
                continue
            value = partial[field]
            if field == "skills":
                value = list(value or [])
            setattr(prof, field, value)

        self._commit(prof)
        logger.info("[USER] updated id=%s fields=%s", user_id, sorted(partial))
        return prof

    def delete(self, user_id: str) -> None:
        # 세션으로 cascade 하지 않음, 없는 id는 조용히 성공
        prof = self.db.get(UserProfile, user_id)
        if prof is None:
            logger.debug("[USER] delete skipped, id=%s not found", user_id)
            return

        self.db.delete(prof)
        self._commit()
        logger.info("[USER] deleted id=%s", user_id)
