"""Persistence layer for the campus user directory."""

from __future__ import annotations

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from campus_notify.domain.entities import DirectoryUser, TargetingSpec
from campus_notify.infrastructure.models import UserModel
from campus_notify.utils import ensure_utc


class UserRepository:
    """Read access to directory users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> DirectoryUser | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def create(self, user: DirectoryUser) -> DirectoryUser:
        model = UserModel(
            name=user.name,
            email=user.email,
            branch_id=user.branch_id,
            semester=user.semester,
            year=user.year,
            is_admin=user.is_admin,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_ids_matching(self, targeting: TargetingSpec) -> set[int]:
        """Return active user ids selected by ``targeting`` with a single query."""

        query = self.session.query(UserModel.id).filter(UserModel.is_active.is_(True))

        if not targeting.all_users:
            conditions = []
            if targeting.branch_ids:
                conditions.append(UserModel.branch_id.in_(sorted(targeting.branch_ids)))
            if targeting.semesters:
                conditions.append(UserModel.semester.in_(sorted(targeting.semesters)))
            if targeting.years:
                conditions.append(UserModel.year.in_(sorted(targeting.years)))

            explicit = (
                UserModel.id.in_(sorted(targeting.user_ids))
                if targeting.user_ids
                else None
            )
            if conditions and explicit is not None:
                query = query.filter(or_(and_(*conditions), explicit))
            elif conditions:
                query = query.filter(and_(*conditions))
            elif explicit is not None:
                query = query.filter(explicit)
            else:
                return set()

        return {user_id for (user_id,) in query.all()}

    @staticmethod
    def _to_entity(model: UserModel) -> DirectoryUser:
        return DirectoryUser(
            id=model.id,
            name=model.name,
            email=model.email,
            branch_id=model.branch_id,
            semester=model.semester,
            year=model.year,
            is_admin=bool(model.is_admin),
            is_active=bool(model.is_active),
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["UserRepository"]
