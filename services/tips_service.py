# services/tips_service.py

import logging
import random
from typing import List, Optional

from core.errors import ServiceError, ServiceResult
from database.base import StorageBackend
from models import Tip

logger = logging.getLogger(__name__)

PREMIUM_TIPS_FEATURE = "advanced_analytics"

DEFAULT_TIPS = [
    Tip("1", "Dopamine fasting isn't about complete deprivation - it's about intentional consumption", "dopamine"),
    Tip("2", "Your brain needs 90 minutes to reset dopamine levels after overstimulation", "dopamine"),
    Tip("3", "Natural rewards like sunlight and exercise create sustainable dopamine", "mindfulness"),
    Tip("4", "Every small win builds momentum - celebrate completing sessions", "productivity"),
    Tip("5", "Boredom is your brain's way of encouraging creativity and reflection", "mindfulness"),
    Tip("6", "Try the 'Pomodoro Technique' - 25 minutes of focus followed by a 5-minute break", "productivity"),
    Tip("7", "Advanced: Create a 'dopamine schedule' to balance digital stimulation throughout your day",
        "dopamine", is_premium=True),
]


class TipsService:
    """
    Сервис совета дня

    Совет выбирается случайно из пула, доступного по подписке.
    Если удалённый пул пуст или недоступен, используются DEFAULT_TIPS.
    Выбор не фиксируется на день: каждый вызов может дать другой совет.
    """

    def __init__(self, backend: StorageBackend, subscription_service,
                 rng: Optional[random.Random] = None):
        self.backend = backend
        self.subscription_service = subscription_service
        self.rng = rng or random.Random()

    @staticmethod
    def _builtin(include_premium: bool, category: Optional[str] = None) -> List[Tip]:
        return [
            tip for tip in DEFAULT_TIPS
            if (include_premium or not tip.is_premium)
            and (category is None or tip.category == category)
        ]

    async def _pool(self, include_premium: bool, category: Optional[str] = None) -> List[Tip]:
        try:
            tips = await self.backend.list_tips(include_premium, category)
        except ServiceError as e:
            logger.warning(f"⚠️ Пул советов недоступен, используем встроенные: {e.message}")
            tips = []

        # Премиум-советы никогда не попадают к бесплатному тарифу
        tips = [tip for tip in tips if include_premium or not tip.is_premium]
        return tips or self._builtin(include_premium, category)

    async def get_daily_tip(self) -> ServiceResult:
        include_premium = await self.subscription_service.has_feature_access(PREMIUM_TIPS_FEATURE)
        tips = await self._pool(include_premium)
        tip = self.rng.choice(tips)
        logger.debug(f"💡 Совет дня: {tip.id}")
        return ServiceResult.success(tip)

    async def get_tips_by_category(self, category: str) -> ServiceResult:
        include_premium = await self.subscription_service.has_feature_access(PREMIUM_TIPS_FEATURE)
        return ServiceResult.success(await self._pool(include_premium, category))
