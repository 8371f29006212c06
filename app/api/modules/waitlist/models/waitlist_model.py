from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class Waitlist(SQLModel, table=True):
    """A registered waitlist email.

    Rows are inserted once and never updated. ``email`` holds the lowercased
    address and carries the unique constraint that decides duplicate signups.
    """

    __tablename__ = "waitlist"
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )
