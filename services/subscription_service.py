# services/subscription_service.py

import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Union

from core.errors import ServiceError, ServiceResult, ValidationError
from models import Entitlement, SubscriptionStatus, SubscriptionTier
from services.base import BaseService

logger = logging.getLogger(__name__)

_PAID = frozenset({SubscriptionTier.PRO, SubscriptionTier.ELITE})
_ELITE = frozenset({SubscriptionTier.ELITE})

# Функция -> тарифы, которые дают к ней доступ
FEATURE_ACCESS: Dict[str, FrozenSet[SubscriptionTier]] = {
    "unlimited_sessions": _PAID,
    "advanced_analytics": _PAID,
    "premium_soundscapes": _PAID,
    "personal_coaching": _ELITE,
    "custom_programs": _ELITE,
}


class SubscriptionService(BaseService):
    """Сервис подписки и доступа к функциям"""

    async def check_subscription_status(self) -> ServiceResult:
        """Подписка текущего пользователя; по умолчанию free/active"""
        try:
            owner_id = await self._owner_id()
            entitlement = await self.backend.get_entitlement(owner_id)
        except ServiceError as e:
            return self._fail("Статус подписки", e)
        return ServiceResult.success(entitlement or Entitlement())

    async def has_feature_access(self, feature: str) -> bool:
        """Доступ к функции; неизвестная функция или ошибка -> False"""
        tiers = FEATURE_ACCESS.get(feature)
        if tiers is None:
            return False

        result = await self.check_subscription_status()
        if not result.ok or result.data is None:
            return False

        return result.data.tier in tiers

    async def update_subscription(self, tier: Union[str, SubscriptionTier],
                                  status: Union[str, SubscriptionStatus],
                                  ends_at: Optional[datetime] = None) -> ServiceResult:
        """Перезаписать подписку пользователя"""
        try:
            entitlement = Entitlement(
                tier=SubscriptionTier(tier),
                status=SubscriptionStatus(status),
                ends_at=ends_at,
            )
        except ValueError as e:
            return self._fail("Обновление подписки", ValidationError(str(e)))

        try:
            owner_id = await self._owner_id()
            entitlement = await self.backend.save_entitlement(owner_id, entitlement)
        except ServiceError as e:
            return self._fail("Обновление подписки", e)

        logger.info(f"💳 Подписка обновлена: {entitlement.tier.value}/{entitlement.status.value}")
        return ServiceResult.success(entitlement)
