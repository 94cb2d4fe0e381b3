# shelfsync/sa/repositories/exclusion.py
from typing import Optional, List, Iterable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shelfsync.exceptions import PersistenceError
from ..models import ImportListExclusion

class ImportListExclusionRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_foreign_ids(self, foreign_ids: Iterable[str]) -> List[ImportListExclusion]:
        """Get the exclusions matching any of the given foreign ids"""
        foreign_ids = list(foreign_ids)
        if not foreign_ids:
            return []
        return (
            self.session.query(ImportListExclusion)
            .filter(ImportListExclusion.foreign_id.in_(foreign_ids))
            .all()
        )

    def add(self, foreign_id: str, name: Optional[str] = None) -> ImportListExclusion:
        """Exclude a foreign id, returning the existing exclusion if there is one"""
        existing = (
            self.session.query(ImportListExclusion)
            .filter(ImportListExclusion.foreign_id == foreign_id)
            .first()
        )
        if existing:
            return existing

        exclusion = ImportListExclusion(foreign_id=foreign_id, name=name)
        try:
            self.session.add(exclusion)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Unable to exclude {foreign_id}: {e}") from e
        return exclusion
