# models/tip.py

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class Tip:
    id: str
    text: str
    category: Optional[str] = None
    is_premium: bool = False
    display_order: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict) -> "Tip":
        return cls(
            id=str(row["id"]),
            text=row["tip_text"],
            category=row.get("tip_category"),
            is_premium=bool(row.get("is_premium", False)),
            display_order=row.get("display_order"),
        )
