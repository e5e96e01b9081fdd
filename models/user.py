# models/user.py

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class UserIdentity:
    """Текущий пользователь в едином виде для обоих хранилищ"""
    id: str
    email: str
    display_name: str

    def to_dict(self) -> dict:
        return asdict(self)

    def to_storage(self) -> dict:
        # Формат ключа dopamind_user в локальном хранилище
        return {"id": self.id, "email": self.email, "name": self.display_name}

    @classmethod
    def from_storage(cls, data: dict) -> "UserIdentity":
        return cls(
            id=data["id"],
            email=data.get("email", ""),
            display_name=data.get("name") or data.get("display_name") or "",
        )

    @classmethod
    def from_remote(cls, user) -> "UserIdentity":
        """Нормализация пользователя удалённого бэкенда"""
        metadata = getattr(user, "user_metadata", None) or {}
        email = getattr(user, "email", None) or ""
        display_name: Optional[str] = (
            metadata.get("full_name") or metadata.get("name") or metadata.get("username")
        )
        return cls(
            id=str(user.id),
            email=email,
            display_name=display_name or email.split("@")[0],
        )
