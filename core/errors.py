#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dopamind - Errors and service results
Иерархия ошибок и пара "результат + ошибка", которую возвращают сервисы
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

# ===== EXCEPTIONS =====


class ServiceError(Exception):
    """Базовое исключение слоя данных"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(ServiceError):
    """Ошибка валидации данных (проверяется вызывающей стороной)"""
    pass


class RemoteError(ServiceError):
    """Ошибка удалённого бэкенда: сеть, аутентификация, ограничения БД.

    Текст сообщения передаётся без изменений.
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class NotConfiguredError(ServiceError):
    """Операция требует удалённого бэкенда, а он не настроен"""
    pass


class NotAvailableError(NotConfiguredError):
    """Возможность недоступна в текущем режиме хранения"""
    pass


class AuthRequiredError(ServiceError):
    """Удалённый режим без вошедшего пользователя"""
    pass


# ===== RESULTS =====


class ResultStatus(Enum):
    """Исход операции сервиса"""
    OK = "ok"
    PENDING_CONFIRMATION = "pending_confirmation"
    ERROR = "error"


@dataclass
class ServiceResult(Generic[T]):
    """Результат операции: данные или ошибка, без исключений"""
    data: Optional[T] = None
    error: Optional[ServiceError] = None
    status: ResultStatus = ResultStatus.OK

    @property
    def ok(self) -> bool:
        return self.error is None and self.status != ResultStatus.ERROR

    @property
    def is_pending(self) -> bool:
        return self.status == ResultStatus.PENDING_CONFIRMATION

    @property
    def message(self) -> Optional[str]:
        """Текст ошибки для показа пользователю"""
        return self.error.message if self.error else None

    @classmethod
    def success(cls, data: Any = None) -> "ServiceResult":
        return cls(data=data)

    @classmethod
    def pending(cls, data: Any = None) -> "ServiceResult":
        return cls(data=data, status=ResultStatus.PENDING_CONFIRMATION)

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult":
        return cls(error=error, status=ResultStatus.ERROR)


__all__ = [
    'ServiceError',
    'ValidationError',
    'RemoteError',
    'NotConfiguredError',
    'NotAvailableError',
    'AuthRequiredError',
    'ResultStatus',
    'ServiceResult'
]
