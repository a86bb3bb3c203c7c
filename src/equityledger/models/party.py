"""Business and counterparty profiles used to fill agreements."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class Business(BaseModel):
    """The business side of an agreement."""

    business_id: UUID
    company_name: Optional[str] = None
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    entity_type: Optional[str] = None
    equity_class: Optional[str] = None


class Profile(BaseModel):
    """The counterparty (job seeker) side of an agreement."""

    profile_id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
