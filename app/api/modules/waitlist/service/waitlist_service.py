import logging
from typing import Any

from app.api.core.exceptions import ConflictError, ValidationError
from app.api.db.database import Datastore
from app.api.modules.waitlist.schemas.waitlist_schema import WaitlistResponse
from app.api.modules.waitlist.service.waitlist_repository import WaitlistCRUD
from app.api.utils.validators import is_valid_email, normalize_email

logger = logging.getLogger("app")

SIGNUP_SUCCESS_MESSAGE = "Successfully joined the waitlist!"


class WaitlistService:
    """Business logic for waitlist signups"""

    def __init__(self, datastore: Datastore):
        self.datastore = datastore

    async def join_waitlist(self, email: Any) -> WaitlistResponse:
        """
        Add an email to the waitlist.

        Handles:
        - Email validation (before any datastore access)
        - Lowercase normalization
        - Database insertion, with the unique constraint deciding duplicates

        Args:
            email: The submitted ``email`` value, of any JSON type

        Returns:
            WaitlistResponse: Confirmation message

        Raises:
            ValidationError: If the email is missing or malformed
            ConflictError: If the email is already registered
            PersistenceError: If the datastore fails
        """
        if not is_valid_email(email):
            raise ValidationError()

        normalized = normalize_email(email)

        try:
            async with self.datastore.session() as db:
                await WaitlistCRUD.create(db, normalized)
        except ConflictError:
            logger.warning(f"Attempted duplicate signup: {normalized}")
            raise

        self._log_signup(normalized)

        return WaitlistResponse(message=SIGNUP_SUCCESS_MESSAGE)

    def _log_signup(self, email: str):
        """Log the signup event"""
        logger.info(f"New waitlist signup: {email}")
