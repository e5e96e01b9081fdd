"""
Сервис таймера фокуса
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.errors import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(seconds, 0), 60)
    return f"{mins:02d}:{secs:02d}"


class FocusTimer:
    """Таймер обратного отсчёта для одной сессии фокуса.

    Тик раз в tick_seconds уменьшает оставшееся время на секунду.
    На нуле выполняется ровно один вызов complete_session; остановка
    до нуля записывает сессию как прерванную.
    """

    def __init__(self, session_service, duration_minutes: int = 25, session_type: str = "focus",
                 tick_seconds: float = 1.0,
                 on_complete: Optional[Callable[[ServiceResult], Awaitable[None]]] = None):
        self.session_service = session_service
        self.duration_minutes = duration_minutes
        self.session_type = session_type
        self.tick_seconds = tick_seconds
        self.on_complete = on_complete

        self.remaining_seconds = duration_minutes * 60
        self.session_id: Optional[str] = None
        self.completion_result: Optional[ServiceResult] = None
        self.completion_error: Optional[Exception] = None
        self._task: Optional[asyncio.Task] = None
        self._completing = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def progress(self) -> float:
        """Прогресс в процентах"""
        total = self.duration_minutes * 60
        return (total - self.remaining_seconds) / total * 100 if total else 0.0

    @property
    def elapsed_minutes(self) -> int:
        return self.duration_minutes - self.remaining_seconds // 60

    def set_duration(self, minutes: int) -> bool:
        """Сменить длительность можно только до старта"""
        if self.is_running or self.session_id is not None:
            return False
        self.duration_minutes = minutes
        self.remaining_seconds = minutes * 60
        return True

    async def start(self) -> ServiceResult:
        """Запуск или продолжение после паузы"""
        if self.is_running:
            return ServiceResult.success(self.session_id)

        if self.session_id is None:
            result = await self.session_service.start_session(self.duration_minutes, self.session_type)
            if not result.ok:
                return result
            self.session_id = result.data.id

        self._task = asyncio.create_task(self._timer_worker())
        logger.info(f"⏰ Таймер запущен: {format_time(self.remaining_seconds)} (сессия {self.session_id})")
        return ServiceResult.success(self.session_id)

    async def pause(self) -> None:
        """Пауза: тик останавливается, запись сессии не меняется"""
        if self._completing:
            return
        await self._halt()
        logger.info(f"⏸️ Таймер на паузе: {format_time(self.remaining_seconds)}")

    async def stop(self) -> ServiceResult:
        """Остановка до конца: сессия записывается как прерванная"""
        if self._completing:
            # Завершение уже идёт, даём ему закончиться
            return ServiceResult.success(None)

        await self._halt()

        result = ServiceResult.success(None)
        if self.session_id is not None:
            result = await self.session_service.cancel_session(self.session_id, self.elapsed_minutes)
            logger.info(f"⏹️ Таймер остановлен, сессия {self.session_id} прервана")

        self.session_id = None
        self.remaining_seconds = self.duration_minutes * 60
        return result

    async def wait(self) -> Optional[ServiceResult]:
        """Дождаться окончания отсчёта"""
        if self._task is not None:
            await self._task
        return self.completion_result

    async def _halt(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _timer_worker(self):
        """Рабочий процесс таймера"""
        try:
            while self.remaining_seconds > 0:
                await asyncio.sleep(self.tick_seconds)
                self.remaining_seconds -= 1
        except asyncio.CancelledError:
            logger.debug(f"⏹️ Тик таймера сессии {self.session_id} остановлен")
            raise

        await self._complete()

    async def _complete(self):
        if self._completing or self.completion_result is not None:
            return
        self._completing = True
        try:
            try:
                self.completion_result = await self.session_service.complete_session(
                    self.session_id, self.elapsed_minutes
                )
            except Exception as e:
                # Таймер работает в фоне: ошибка сохраняется, а не уходит в задачу
                logger.error(f"❌ Ошибка завершения сессии {self.session_id}: {e}")
                self.completion_error = e
                self.completion_result = ServiceResult.failure(ServiceError(str(e)))
            else:
                logger.info(f"🏁 Таймер завершён, сессия {self.session_id}")

            if self.on_complete is not None:
                await self.on_complete(self.completion_result)
        finally:
            self._completing = False
