# shelfsync/sa/repositories/history.py
from typing import Optional, List
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shelfsync.exceptions import PersistenceError
from ..models import History, HistoryEventType

class HistoryRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_author(self, author_id: int, event_type: Optional[HistoryEventType] = None) -> List[History]:
        """Get history for an author, newest first, optionally for one event type"""
        query = self.session.query(History).filter(History.author_id == author_id)
        if event_type is not None:
            query = query.filter(History.event_type == event_type.value)
        return query.order_by(History.date.desc()).all()

    def reassign_author(self, from_author_id: int, to_author_id: int, commit: bool = True) -> int:
        """Point every history row of one author at another.
        
        Returns:
            Number of rows moved
        """
        try:
            result = self.session.execute(
                update(History)
                .where(History.author_id == from_author_id)
                .values(author_id=to_author_id)
            )
            if commit:
                self.session.commit()
        except SQLAlchemyError as e:
            if commit:
                self.session.rollback()
            raise PersistenceError(
                f"Unable to move history from author {from_author_id} to {to_author_id}: {e}"
            ) from e
        return result.rowcount
