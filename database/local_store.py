# database/local_store.py

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    Локальное key-value хранилище (аналог localStorage браузера)

    Значения хранятся как JSON-строки по строковым ключам, целиком
    держатся в памяти и сбрасываются на диск после каждой записи.
    Запись на диск атомарная: через временный файл.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._items: Dict[str, str] = {}
        self._lock = threading.RLock()
        self._load()

    def _load(self):
        """Загрузка хранилища из файла"""
        if self.path is None:
            logger.debug("📂 Хранилище только в памяти")
            return

        if not self.path.exists():
            logger.info(f"📂 Файл хранилища {self.path} не найден, начинаем с пустого")
            return

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"❌ Ошибка парсинга JSON: {e}")
            self._move_corrupted()
            return

        if not isinstance(data, dict):
            logger.warning("⚠️ Неверный формат файла хранилища")
            self._move_corrupted()
            return

        self._items = {str(key): str(value) for key, value in data.items()}
        logger.info(f"📂 Загружено {len(self._items)} ключей из {self.path}")

    def _move_corrupted(self):
        """Перенос повреждённого файла в резервную копию"""
        backup_name = f"{self.path.stem}.corrupted_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        backup_path = self.path.with_name(backup_name)
        self.path.replace(backup_path)
        self._items = {}
        logger.warning(f"🔄 Повреждённый файл перемещён в {backup_path}")

    def _flush(self):
        if self.path is None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix('.tmp')
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(self._items, f, ensure_ascii=False, indent=2)
        temp_file.replace(self.path)

    # ===== API в стиле localStorage =====

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
            self._flush()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if self._items.pop(key, None) is not None:
                self._flush()

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._flush()
            logger.info("🗑️ Локальное хранилище очищено")

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

    # ===== JSON-помощники =====

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"⚠️ Значение ключа {key} повреждено, используется значение по умолчанию")
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))

    def get_int(self, key: str, default: int = 0) -> int:
        raw = self.get_item(key)
        try:
            return int(raw) if raw is not None else default
        except ValueError:
            return default

    def set_int(self, key: str, value: int) -> None:
        self.set_item(key, str(value))
