import re

from core.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_mood_score(score) -> bool:
    return isinstance(score, int) and not isinstance(score, bool) and 1 <= score <= 5


def is_valid_duration(minutes) -> bool:
    return isinstance(minutes, int) and not isinstance(minutes, bool) and 0 < minutes <= 24 * 60


def is_valid_email(email: str) -> bool:
    return bool(email) and bool(EMAIL_RE.match(email))


def validate_mood_input(mood_input) -> None:
    """Проверка ввода настроения на стороне вызывающего кода"""
    if not is_valid_mood_score(mood_input.score):
        raise ValidationError("Оценка настроения должна быть от 1 до 5")
    for name in ("energy", "stress"):
        value = getattr(mood_input, name, None)
        if value is not None and not is_valid_mood_score(value):
            raise ValidationError(f"{name} должен быть от 1 до 5")
