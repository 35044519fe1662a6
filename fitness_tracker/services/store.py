"""
로컬 관계형 저장소 (sqlite + SQLAlchemy).

- 스키마 생성, 엔티티별 CRUD, 활동 로그 upsert, 통계 집계
- 모든 쓰기는 저장소 단위 락 + 단일 트랜잭션(_write) 안에서 실행
- 모든 값은 바인딩 파라미터로 전달 (문자열 보간 없음)
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

import fitness_tracker.models  # noqa: F401
from fitness_tracker.database import Base, make_engine, make_session_factory
from fitness_tracker.exceptions import DuplicateEmail, NotFound, StorageError
from fitness_tracker.models.activity import Activity
from fitness_tracker.models.activity_log import ActivityLog
from fitness_tracker.models.measurement import BodyMeasurement
from fitness_tracker.models.user import User, UserProfile
from fitness_tracker.models.workout import WorkoutSession
from fitness_tracker.services import stats_sql
from fitness_tracker.sql import model_to_dict

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("age", "weight", "height", "gender", "fitness_goal")
ACTIVITY_FIELDS = ("name", "description", "icon", "target_value", "target_unit", "category")
WORKOUT_FIELDS = ("workout_type", "duration_minutes", "calories_burned", "intensity", "notes", "session_date")
MEASUREMENT_FIELDS = ("weight", "body_fat_percentage", "muscle_mass", "waist_circumference", "measurement_date")

# clear_user_data 삭제 순서 (자식 → 부모)
USER_CHILD_MODELS = (ActivityLog, Activity, WorkoutSession, BodyMeasurement, UserProfile)

_UPSERT_DIALECTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


def _as_date(value) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def _is_email_conflict(exc) -> bool:
    # sqlite: "UNIQUE constraint failed: users.email" / postgresql: 유니크 인덱스 이름
    if not isinstance(exc, IntegrityError):
        return False
    message = str(exc.orig)
    return "users.email" in message or "ix_users_email" in message


def _pick(fields: Dict[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    return {k: fields[k] for k in allowed if k in fields}


class RelationalStore:
    def __init__(self, db_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None and db_url is None:
            raise ValueError("db_url or engine is required")
        self.engine = engine if engine is not None else make_engine(db_url)
        self.SessionLocal = make_session_factory(self.engine)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # 트랜잭션
    # ------------------------------------------------------------------
    @contextmanager
    def _write(self):
        """단일 writer: 락을 쥔 채로 한 트랜잭션을 열고 커밋/롤백."""
        with self._lock:
            db = self.SessionLocal()
            try:
                yield db
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"write transaction failed: {e}")
                raise StorageError("Storage operation failed") from e
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    @contextmanager
    def _read(self):
        db = self.SessionLocal()
        try:
            yield db
        except SQLAlchemyError as e:
            logger.error(f"read failed: {e}")
            raise StorageError("Storage operation failed") from e
        finally:
            db.close()

    def init_schema(self) -> None:
        with self._lock:
            try:
                with self.engine.begin() as conn:
                    Base.metadata.create_all(bind=conn)
            except SQLAlchemyError as e:
                raise StorageError("Schema creation failed") from e
        logger.info("database schema ready")

    def dispose(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    # users
    # ------------------------------------------------------------------
    def create_user(self, email: str, password_hash: str, full_name: str) -> int:
        return self.create_account(email, password_hash, full_name, activities=())

    def create_account(
        self,
        email: str,
        password_hash: str,
        full_name: str,
        activities: Iterable[Dict[str, Any]] = (),
        with_profile: bool = False,
    ) -> int:
        """사용자 + (빈 프로필) + 기본 활동을 한 트랜잭션으로 생성."""
        try:
            with self._write() as db:
                user = User(email=email, password_hash=password_hash, full_name=full_name)
                db.add(user)
                db.flush()
                if with_profile:
                    db.add(UserProfile(user_id=user.id))
                for a in activities:
                    db.add(Activity(user_id=user.id, **_pick(a, ACTIVITY_FIELDS)))
                user_id = user.id
        except StorageError as e:
            if _is_email_conflict(e.__cause__):
                raise DuplicateEmail() from e.__cause__
            raise
        return user_id

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """로그인용: password_hash 포함."""
        with self._read() as db:
            user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
            return model_to_dict(user) if user else None

    def get_user_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._read() as db:
            user = db.get(User, user_id)
            return model_to_dict(user, exclude=("password_hash",)) if user else None

    def get_password_hash(self, user_id: int) -> Optional[str]:
        with self._read() as db:
            return db.execute(select(User.password_hash).where(User.id == user_id)).scalar_one_or_none()

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        with self._write() as db:
            res = db.execute(update(User).where(User.id == user_id).values(password_hash=password_hash))
            if res.rowcount == 0:
                raise NotFound(f"User {user_id} not found")

    def delete_user(self, user_id: int) -> None:
        # FK ON DELETE CASCADE 로 자식 5개 테이블까지 같은 트랜잭션에서 삭제
        with self._write() as db:
            res = db.execute(delete(User).where(User.id == user_id))
            if res.rowcount == 0:
                raise NotFound(f"User {user_id} not found")
        logger.info(f"user deleted: user_id={user_id}")

    # ------------------------------------------------------------------
    # profiles
    # ------------------------------------------------------------------
    def create_or_update_profile(self, user_id: int, profile_fields: Dict[str, Any]) -> None:
        values = _pick(profile_fields, PROFILE_FIELDS)
        with self._write() as db:
            profile = db.execute(
                select(UserProfile).where(UserProfile.user_id == user_id)
            ).scalar_one_or_none()
            if profile is None:
                db.add(UserProfile(user_id=user_id, **values))
            else:
                for field, value in values.items():
                    setattr(profile, field, value)

    def get_user_profile(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._read() as db:
            profile = db.execute(
                select(UserProfile).where(UserProfile.user_id == user_id)
            ).scalar_one_or_none()
            return model_to_dict(profile) if profile else None

    # ------------------------------------------------------------------
    # activities
    # ------------------------------------------------------------------
    def create_activity(self, user_id: int, fields: Dict[str, Any]) -> int:
        with self._write() as db:
            activity = Activity(user_id=user_id, **_pick(fields, ACTIVITY_FIELDS))
            db.add(activity)
            db.flush()
            return activity.id

    def get_activities_by_user(self, user_id: int) -> List[Dict[str, Any]]:
        with self._read() as db:
            stmt = (
                select(Activity)
                .where(Activity.user_id == user_id, Activity.is_active == 1)
                .order_by(Activity.created_at.desc(), Activity.id.desc())
            )
            return [model_to_dict(a) for a in db.execute(stmt).scalars().all()]

    def get_activity(self, activity_id: int) -> Optional[Dict[str, Any]]:
        with self._read() as db:
            activity = db.get(Activity, activity_id)
            return model_to_dict(activity) if activity else None

    def update_activity(self, activity_id: int, fields: Dict[str, Any]) -> None:
        values = _pick(fields, ACTIVITY_FIELDS)
        if not values:
            return
        with self._write() as db:
            res = db.execute(update(Activity).where(Activity.id == activity_id).values(**values))
            if res.rowcount == 0:
                raise NotFound(f"Activity {activity_id} not found")

    def delete_activity(self, activity_id: int) -> None:
        """soft delete: is_active = 0. 대상 id 하나만."""
        with self._write() as db:
            res = db.execute(update(Activity).where(Activity.id == activity_id).values(is_active=0))
            if res.rowcount == 0:
                raise NotFound(f"Activity {activity_id} not found")

    # ------------------------------------------------------------------
    # activity logs
    # ------------------------------------------------------------------
    def log_activity(
        self,
        user_id: int,
        activity_id: int,
        log_date,
        completed: bool,
        actual_value: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> None:
        """(activity_id, log_date) 기준 upsert. 같은 키로 다시 호출하면 덮어씀."""
        insert = _UPSERT_DIALECTS.get(self.engine.dialect.name)
        if insert is None:
            raise StorageError(f"Unsupported database dialect: {self.engine.dialect.name}")

        values = {
            "activity_id": activity_id,
            "user_id": user_id,
            "completed": 1 if completed else 0,
            "actual_value": actual_value,
            "notes": notes,
            "log_date": _as_date(log_date),
        }
        stmt = insert(ActivityLog).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ActivityLog.activity_id, ActivityLog.log_date],
            set_={
                "user_id": stmt.excluded.user_id,
                "completed": stmt.excluded.completed,
                "actual_value": stmt.excluded.actual_value,
                "notes": stmt.excluded.notes,
                "logged_at": func.now(),
            },
        )
        with self._write() as db:
            db.execute(stmt)

    def get_activity_logs_for_date(self, user_id: int, log_date) -> List[Dict[str, Any]]:
        with self._read() as db:
            return stats_sql.logs_for_date(db.connection(), user_id, _as_date(log_date).isoformat())

    def get_activity_stats(self, user_id: int, start_date, end_date) -> List[Dict[str, Any]]:
        with self._read() as db:
            return stats_sql.activity_stats(
                db.connection(), user_id,
                _as_date(start_date).isoformat(), _as_date(end_date).isoformat(),
            )

    # ------------------------------------------------------------------
    # workout sessions
    # ------------------------------------------------------------------
    def create_workout_session(self, user_id: int, fields: Dict[str, Any]) -> int:
        values = _pick(fields, WORKOUT_FIELDS)
        values["session_date"] = _as_date(values["session_date"])
        with self._write() as db:
            session = WorkoutSession(user_id=user_id, **values)
            db.add(session)
            db.flush()
            return session.id

    def get_workout_sessions(self, user_id: int, start_date, end_date) -> List[Dict[str, Any]]:
        with self._read() as db:
            stmt = (
                select(WorkoutSession)
                .where(
                    WorkoutSession.user_id == user_id,
                    WorkoutSession.session_date.between(_as_date(start_date), _as_date(end_date)),
                )
                .order_by(WorkoutSession.session_date.desc(), WorkoutSession.id.desc())
            )
            return [model_to_dict(s) for s in db.execute(stmt).scalars().all()]

    # ------------------------------------------------------------------
    # body measurements
    # ------------------------------------------------------------------
    def add_body_measurement(self, user_id: int, fields: Dict[str, Any]) -> int:
        values = _pick(fields, MEASUREMENT_FIELDS)
        values["measurement_date"] = _as_date(values["measurement_date"])
        with self._write() as db:
            m = BodyMeasurement(user_id=user_id, **values)
            db.add(m)
            db.flush()
            return m.id

    def get_body_measurements(self, user_id: int, limit: int = 30) -> List[Dict[str, Any]]:
        with self._read() as db:
            stmt = (
                select(BodyMeasurement)
                .where(BodyMeasurement.user_id == user_id)
                .order_by(BodyMeasurement.measurement_date.desc(), BodyMeasurement.id.desc())
                .limit(limit)
            )
            return [model_to_dict(m) for m in db.execute(stmt).scalars().all()]

    # ------------------------------------------------------------------
    # utility
    # ------------------------------------------------------------------
    def clear_user_data(self, user_id: int) -> None:
        """사용자 데이터(자식 5개 테이블) 전체 삭제. 계정은 유지. 한 트랜잭션."""
        with self._write() as db:
            for model in USER_CHILD_MODELS:
                db.execute(delete(model).where(model.user_id == user_id))
        logger.info(f"user data cleared: user_id={user_id}")

