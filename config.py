#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dopamind - Configuration
Централизованная конфигурация слоя данных с валидацией

Выбор хранилища (удалённый бэкенд или локальное хранилище) делается
один раз при старте процесса и не меняется до его завершения.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
from enum import Enum


class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class RemoteConfig:
    """Конфигурация удалённого бэкенда (база данных + аутентификация)"""
    url: Optional[str] = None
    anon_key: Optional[str] = None
    oauth_redirect_url: Optional[str] = None
    streak_rpc: Optional[str] = None  # имя серверной процедуры подсчёта стрика

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass
class LocalStorageConfig:
    """Конфигурация локального хранилища"""
    data_dir: Path
    storage_file: str = "local_storage.json"
    mood_history_size: int = 7

    @property
    def path(self) -> Path:
        return self.data_dir / self.storage_file


class AppConfig:
    """Главный класс конфигурации"""

    def __init__(self, env: Optional[Dict[str, str]] = None):
        self._env = os.environ if env is None else env
        self.environment = Environment(self._get('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._env.get(key)
        if value is None or value == "":
            return default
        return value

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Удалённый бэкенд
        self.remote = RemoteConfig(
            url=self._get('DOPAMIND_SUPABASE_URL'),
            anon_key=self._get('DOPAMIND_SUPABASE_ANON_KEY'),
            oauth_redirect_url=self._get('DOPAMIND_OAUTH_REDIRECT_URL'),
            streak_rpc=self._get('DOPAMIND_STREAK_RPC'),
        )

        # Директории
        self.data_dir = Path(self._get('DATA_DIR', 'data'))
        self.export_dir = Path(self._get('EXPORT_DIR', 'exports'))
        self.log_dir = Path(self._get('LOG_DIR', 'logs'))

        # Локальное хранилище
        self.local = LocalStorageConfig(
            data_dir=self.data_dir,
            storage_file=self._get('LOCAL_STORAGE_FILE', 'local_storage.json'),
            mood_history_size=int(self._get('MOOD_HISTORY_SIZE', '7')),
        )

        # Логирование
        self.log_level = LogLevel(self._get('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = self._get('LOG_TO_FILE', 'false').lower() == 'true'
        self.log_format = self._get(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors: List[str] = []

        if self.local.mood_history_size <= 0:
            errors.append("MOOD_HISTORY_SIZE должен быть положительным числом")

        if self.remote.url and not self.remote.url.startswith(('http://', 'https://')):
            errors.append("DOPAMIND_SUPABASE_URL должен начинаться с http:// или https://")

        if bool(self.remote.url) != bool(self.remote.anon_key):
            logging.warning("⚠️ Задан только один из DOPAMIND_SUPABASE_URL/DOPAMIND_SUPABASE_ANON_KEY - используется локальное хранилище")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Создание необходимых директорий"""
        for directory in [self.data_dir, self.export_dir, self.log_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def is_remote_configured(self) -> bool:
        """Заданы ли адрес и ключ удалённого бэкенда"""
        return self.remote.is_configured

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        logging_config: Dict[str, Any] = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                },
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'httpx': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'httpcore': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
            }
        }

        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"dopamind_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return logging_config

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации в словарь"""
        return {
            'environment': self.environment.value,
            'remote': {
                'configured': self.remote.is_configured,
                'url': self.remote.url,
                'anon_key': (self.remote.anon_key[:6] + "...") if self.remote.anon_key else None,  # Скрываем ключ
                'streak_rpc': self.remote.streak_rpc,
            },
            'local_storage': str(self.local.path),
            'mood_history_size': self.local.mood_history_size,
            'log_level': self.log_level.value
        }


# Глобальный экземпляр конфигурации
config = AppConfig()


def is_remote_configured(app_config: Optional[AppConfig] = None) -> bool:
    """Проверка конфигурации удалённого бэкенда.

    True только если заданы и адрес подключения, и ключ доступа.
    """
    return (app_config or config).is_remote_configured()


__all__ = [
    'config',
    'AppConfig',
    'Environment',
    'LogLevel',
    'RemoteConfig',
    'LocalStorageConfig',
    'is_remote_configured'
]
