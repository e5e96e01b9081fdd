# models/subscription.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.enums import SubscriptionTier, SubscriptionStatus
from utils.datetime_utils import to_iso, parse_iso


@dataclass
class Entitlement:
    tier: SubscriptionTier = SubscriptionTier.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    ends_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "status": self.status.value,
            "endsAt": to_iso(self.ends_at) if self.ends_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entitlement":
        ends_at = data.get("endsAt")
        return cls(
            tier=SubscriptionTier(data.get("tier") or SubscriptionTier.FREE.value),
            status=SubscriptionStatus(data.get("status") or SubscriptionStatus.ACTIVE.value),
            ends_at=parse_iso(ends_at) if ends_at else None,
        )

    @classmethod
    def from_profile_row(cls, row: dict) -> "Entitlement":
        """Поля подписки из строки user_profiles"""
        ends_at = row.get("subscription_ends_at")
        return cls(
            tier=SubscriptionTier(row.get("subscription_tier") or SubscriptionTier.FREE.value),
            status=SubscriptionStatus(row.get("subscription_status") or SubscriptionStatus.ACTIVE.value),
            ends_at=parse_iso(ends_at) if ends_at else None,
        )

    def to_profile_row(self) -> dict:
        return {
            "subscription_tier": self.tier.value,
            "subscription_status": self.status.value,
            "subscription_ends_at": to_iso(self.ends_at) if self.ends_at else None,
        }
