# shelfsync/sa/repositories/metadata_profile.py
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shelfsync.exceptions import PersistenceError
from ..models import MetadataProfile

DEFAULT_PROFILE_NAME = "Standard"

class MetadataProfileRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, profile_id: int) -> Optional[MetadataProfile]:
        return self.session.get(MetadataProfile, profile_id)

    def get_default(self) -> MetadataProfile:
        """Get the standard profile, creating it on first use"""
        profile = (
            self.session.query(MetadataProfile)
            .filter(MetadataProfile.name == DEFAULT_PROFILE_NAME)
            .first()
        )
        if profile:
            return profile

        profile = MetadataProfile(
            name=DEFAULT_PROFILE_NAME,
            min_popularity=0.0,
            skip_missing_date=True,
            skip_parts_and_sets=True,
            ignored=[]
        )
        try:
            self.session.add(profile)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Unable to create default metadata profile: {e}") from e
        return profile
