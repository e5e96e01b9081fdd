#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dopamind - Models Package
Модели данных слоя хранения
"""

from .enums import (
    SessionType,
    SessionStatus,
    SubscriptionTier,
    SubscriptionStatus,
    AuthProvider,
    TipCategory
)

from .user import UserIdentity

from .focus import FocusSession

from .mood import (
    MoodInput,
    MoodEntry
)

from .subscription import Entitlement

from .tip import Tip

from .analytics import (
    UserStats,
    AnalyticsEvent
)

__all__ = [
    # Enums
    'SessionType',
    'SessionStatus',
    'SubscriptionTier',
    'SubscriptionStatus',
    'AuthProvider',
    'TipCategory',

    # User models
    'UserIdentity',
    'UserStats',

    # Session / mood models
    'FocusSession',
    'MoodInput',
    'MoodEntry',

    # Subscription / tips
    'Entitlement',
    'Tip',

    # Analytics
    'AnalyticsEvent'
]
