"""
계정/트래커 서비스.

외부(화면, HTTP 라우터)가 사용하는 유일한 진입점. 해셔, 세션 저장소, 관계형 저장소는
생성자로 주입받는다 (전역 싱글턴 없음).
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fitness_tracker.exceptions import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from fitness_tracker.services.session_store import SessionStore
from fitness_tracker.services.store import (
    ACTIVITY_FIELDS,
    MEASUREMENT_FIELDS,
    PROFILE_FIELDS,
    WORKOUT_FIELDS,
    RelationalStore,
)
from fitness_tracker.utils.security import PasswordHasher
from fitness_tracker.utils.validators import ensure_date, ensure_full_name, ensure_password, validate_email

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITIES = [
    {"name": "💧 Hydration", "description": "Drink water throughout the day", "icon": "💧",
     "target_value": 8, "target_unit": "glasses", "category": "nutrition"},
    {"name": "🏃 Cardio", "description": "Cardiovascular exercise", "icon": "🏃",
     "target_value": 30, "target_unit": "minutes", "category": "exercise"},
    {"name": "🏋️ Strength", "description": "Strength training workout", "icon": "🏋️",
     "target_value": 45, "target_unit": "minutes", "category": "exercise"},
    {"name": "🧘 Stretching", "description": "Flexibility and mobility work", "icon": "🧘",
     "target_value": 15, "target_unit": "minutes", "category": "recovery"},
    {"name": "😴 Sleep", "description": "Quality sleep", "icon": "😴",
     "target_value": 8, "target_unit": "hours", "category": "recovery"},
    {"name": "🥗 Healthy Meal", "description": "Balanced, nutritious meal", "icon": "🥗",
     "target_value": 3, "target_unit": "meals", "category": "nutrition"},
    {"name": "📊 Track Progress", "description": "Log weight or measurements", "icon": "📊",
     "target_value": 1, "target_unit": "entry", "category": "tracking"},
]


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _reject_unknown(fields: Dict[str, Any], allowed, what: str) -> None:
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown {what} field(s): {', '.join(unknown)}")


class AccountService:
    def __init__(self, store: RelationalStore, sessions: SessionStore, hasher: PasswordHasher):
        self.store = store
        self.sessions = sessions
        self.hasher = hasher

    # ------------------------------------------------------------------
    # 인증 상태
    # ------------------------------------------------------------------
    def register(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        email = normalize_email(email)
        if not validate_email(email):
            raise ValidationError("Invalid email format")
        ensure_password(password)
        full_name = ensure_full_name(full_name)

        if self.store.get_user_by_email(email):
            raise DuplicateEmail()

        user_id = self.store.create_account(
            email,
            self.hasher.make_credential(password),
            full_name,
            activities=DEFAULT_ACTIVITIES,
            with_profile=True,
        )
        user = self.store.get_user_by_id(user_id)
        self.sessions.create_session(user)
        logger.info(f"registered: user_id={user_id}, email={email}")
        return user

    def login(self, email: str, password: str) -> Dict[str, Any]:
        email = normalize_email(email)
        record = self.store.get_user_by_email(email)
        if record is None:
            # 존재하지 않는 계정도 해시 1회 계산 (응답 시간으로 계정 존재 여부가 드러나지 않게)
            self.hasher.dummy_verify(password)
            logger.info(f"login failed: email={email}")
            raise InvalidCredentials()
        if not self.hasher.verify(password, record["password_hash"]):
            logger.info(f"login failed: email={email}")
            raise InvalidCredentials()

        user = {k: v for k, v in record.items() if k != "password_hash"}
        self.sessions.create_session(user)
        logger.info(f"login ok: user_id={user['id']}")
        return user

    def logout(self) -> None:
        self.sessions.clear_session()

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        return self.sessions.get_current_user()

    @property
    def is_authenticated(self) -> bool:
        return self.get_current_user() is not None

    def change_password(self, user_id: int, current_password: str, new_password: str) -> bool:
        stored = self.store.get_password_hash(user_id)
        if stored is None:
            raise NotFound(f"User {user_id} not found")
        if not self.hasher.verify(current_password, stored):
            raise InvalidCredentials("Current password is incorrect")
        ensure_password(new_password)
        self.store.update_password_hash(user_id, self.hasher.make_credential(new_password))
        logger.info(f"password changed: user_id={user_id}")
        return True

    def delete_account(self, user_id: int, current_password: str) -> None:
        stored = self.store.get_password_hash(user_id)
        if stored is None:
            raise NotFound(f"User {user_id} not found")
        if not self.hasher.verify(current_password, stored):
            raise InvalidCredentials("Current password is incorrect")
        self.store.delete_user(user_id)
        current = self.sessions.get_current_user()
        if current and current.get("id") == user_id:
            self.sessions.clear_session()

    # ------------------------------------------------------------------
    # 프로필
    # ------------------------------------------------------------------
    def _require_user(self, user_id: int) -> Dict[str, Any]:
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def update_profile(self, user_id: int, profile_fields: Dict[str, Any]) -> Dict[str, Any]:
        _reject_unknown(profile_fields, PROFILE_FIELDS, "profile")
        self._require_user(user_id)
        self.store.create_or_update_profile(user_id, profile_fields)
        return self.store.get_user_profile(user_id)

    def get_profile(self, user_id: int) -> Dict[str, Any]:
        self._require_user(user_id)
        profile = self.store.get_user_profile(user_id)
        if profile is None:
            raise NotFound(f"Profile for user {user_id} not found")
        return profile

    def clear_user_data(self, user_id: int) -> None:
        self._require_user(user_id)
        self.store.clear_user_data(user_id)

    # ------------------------------------------------------------------
    # 활동 / 일일 로그
    # ------------------------------------------------------------------
    def _require_activity(self, user_id: int, activity_id: int) -> Dict[str, Any]:
        # 다른 사용자의 활동이나 삭제된 활동은 없는 것으로 취급
        activity = self.store.get_activity(activity_id)
        if activity is None or activity["user_id"] != user_id or not activity["is_active"]:
            raise NotFound(f"Activity {activity_id} not found")
        return activity

    def list_activities(self, user_id: int) -> List[Dict[str, Any]]:
        self._require_user(user_id)
        return self.store.get_activities_by_user(user_id)

    def create_activity(self, user_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        _reject_unknown(fields, ACTIVITY_FIELDS, "activity")
        if not (fields.get("name") or "").strip():
            raise ValidationError("Please enter activity name")
        self._require_user(user_id)
        activity_id = self.store.create_activity(user_id, {**fields, "name": fields["name"].strip()})
        return self.store.get_activity(activity_id)

    def update_activity(self, user_id: int, activity_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        _reject_unknown(fields, ACTIVITY_FIELDS, "activity")
        if "name" in fields:
            if not (fields["name"] or "").strip():
                raise ValidationError("Please enter activity name")
            fields = {**fields, "name": fields["name"].strip()}
        self._require_activity(user_id, activity_id)
        self.store.update_activity(activity_id, fields)
        return self.store.get_activity(activity_id)

    def delete_activity(self, user_id: int, activity_id: int) -> None:
        self._require_activity(user_id, activity_id)
        self.store.delete_activity(activity_id)

    def log_activity(
        self,
        user_id: int,
        activity_id: int,
        log_date,
        completed: bool,
        actual_value: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> None:
        log_date = ensure_date(log_date, "log_date")
        self._require_activity(user_id, activity_id)
        self.store.log_activity(user_id, activity_id, log_date, bool(completed), actual_value, notes)

    def get_today_logs(self, user_id: int, log_date=None) -> Dict[int, Dict[str, Any]]:
        """activity_id -> {completed, actual_value, notes}"""
        log_date = ensure_date(log_date or date.today(), "log_date")
        self._require_user(user_id)
        return {
            row["activity_id"]: {
                "completed": row["completed"],
                "actual_value": row["actual_value"],
                "notes": row["notes"],
            }
            for row in self.store.get_activity_logs_for_date(user_id, log_date)
        }

    def get_stats(self, user_id: int, start_date, end_date) -> List[Dict[str, Any]]:
        start_date = ensure_date(start_date, "start_date")
        end_date = ensure_date(end_date, "end_date")
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        self._require_user(user_id)
        return self.store.get_activity_stats(user_id, start_date, end_date)

    # ------------------------------------------------------------------
    # 운동 세션 / 신체 측정
    # ------------------------------------------------------------------
    def log_workout(self, user_id: int, fields: Dict[str, Any]) -> int:
        _reject_unknown(fields, WORKOUT_FIELDS, "workout")
        if not (fields.get("workout_type") or "").strip():
            raise ValidationError("workout_type is required")
        fields = {**fields, "session_date": ensure_date(fields.get("session_date"), "session_date")}
        self._require_user(user_id)
        return self.store.create_workout_session(user_id, fields)

    def list_workouts(self, user_id: int, start_date, end_date) -> List[Dict[str, Any]]:
        start_date = ensure_date(start_date, "start_date")
        end_date = ensure_date(end_date, "end_date")
        self._require_user(user_id)
        return self.store.get_workout_sessions(user_id, start_date, end_date)

    def log_measurement(self, user_id: int, fields: Dict[str, Any]) -> int:
        _reject_unknown(fields, MEASUREMENT_FIELDS, "measurement")
        fields = {**fields, "measurement_date": ensure_date(fields.get("measurement_date"), "measurement_date")}
        self._require_user(user_id)
        return self.store.add_body_measurement(user_id, fields)

    def list_measurements(self, user_id: int, limit: int = 30) -> List[Dict[str, Any]]:
        if limit < 1:
            raise ValidationError("limit must be positive")
        self._require_user(user_id)
        return self.store.get_body_measurements(user_id, limit)
