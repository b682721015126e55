"""
Template catalog and entitlement models (read-only reference data)
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator

from cvstudio.config import RESTRICTED_CATEGORIES
from cvstudio.models.cv_document import CVModel
from cvstudio.models.enums import PurchaseStatus


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _ref_id(value):
    """Populated references arrive as objects; keep only their id"""
    if isinstance(value, dict):
        return value.get('_id') or value.get('id')
    return value


class Template(CVModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices('id', '_id'))
    key: str
    name: str = ""
    category: str = "Free"
    price: float = 0.0
    isActive: bool = True

    @property
    def is_restricted(self) -> bool:
        return self.category in RESTRICTED_CATEGORIES


class Purchase(CVModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices('id', '_id'))
    user: Optional[str] = None
    cvDocument: Optional[str] = None
    template: Optional[str] = None
    status: str = PurchaseStatus.PENDING.value
    expiresAt: Optional[datetime] = None

    @field_validator('user', 'cvDocument', 'template', mode='before')
    @classmethod
    def _unwrap_reference(cls, v):
        return _ref_id(v)

    @field_validator('expiresAt')
    @classmethod
    def _expiry_utc(cls, v):
        return _as_utc(v)

    def is_active(self, now: datetime = None) -> bool:
        """Completed and, when time-bounded, not yet expired"""
        if self.status != PurchaseStatus.COMPLETED.value:
            return False
        if self.expiresAt is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now <= self.expiresAt


class Entitlement(CVModel):
    """What the user may export: a global window plus per-document purchases"""
    premiumUntil: Optional[datetime] = None
    purchases: List[Purchase] = Field(default_factory=list)

    @field_validator('premiumUntil')
    @classmethod
    def _premium_utc(cls, v):
        return _as_utc(v)

    def has_global_access(self, now: datetime = None) -> bool:
        if self.premiumUntil is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now < self.premiumUntil

    def has_document_purchase(self, cv_id: Optional[str], now: datetime = None) -> bool:
        if not cv_id:
            return False
        return any(
            p.cvDocument == cv_id and p.is_active(now)
            for p in self.purchases
        )
