# models/enums.py

from enum import Enum


class SessionType(Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    DEEP_WORK = "deep_work"


class SessionStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SubscriptionTier(Enum):
    FREE = "free"
    PRO = "pro"
    ELITE = "elite"


class SubscriptionStatus(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class AuthProvider(Enum):
    GOOGLE = "google"
    APPLE = "apple"


class TipCategory(Enum):
    DOPAMINE = "dopamine"
    MINDFULNESS = "mindfulness"
    PRODUCTIVITY = "productivity"
