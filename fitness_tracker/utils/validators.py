import re
from datetime import date, datetime
from typing import List

from fitness_tracker.exceptions import ValidationError


def validate_email(email: str) -> bool:
    """@ 가 정확히 하나, 그 뒤 도메인에 '.' 이 있고 공백이 없어야 함."""
    if not isinstance(email, str) or not email or re.search(r"\s", email):
        return False
    if email.count("@") != 1:
        return False
    local, domain = email.split("@")
    if not local or "." not in domain:
        return False
    return all(label for label in domain.split("."))


def password_errors(password: str) -> List[str]:
    # 8자 이상, 대문자/소문자/숫자 각 1개 이상
    if not isinstance(password, str):
        return ["Password is required"]
    errors = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    return errors


def ensure_password(password: str) -> None:
    errors = password_errors(password)
    if errors:
        raise ValidationError(". ".join(errors), errors)


def ensure_full_name(full_name: str) -> str:
    if not isinstance(full_name, str) or len(full_name.strip()) < 2:
        raise ValidationError("Full name must be at least 2 characters")
    return full_name.strip()


def ensure_date(value, field: str = "date") -> str:
    """date 객체 또는 'YYYY-MM-DD' 문자열을 ISO 문자열로 정규화."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")
