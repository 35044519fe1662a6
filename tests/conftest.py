"""
pytest 공용 fixture.

- 테스트마다 tmp_path 아래에 새 sqlite 파일 / 세션 파일을 만든다 (테스트 간 격리)
- 해시 반복 횟수는 테스트 속도를 위해 낮춘다
- client 는 같은 서비스 인스턴스를 주입한 FastAPI TestClient
"""

import datetime

import pytest
from sqlalchemy import func, select
from fastapi.testclient import TestClient

from fitness_tracker.config import Settings
from fitness_tracker.main import create_app
from fitness_tracker.models import ActivityLog
from fitness_tracker.services.account_service import AccountService
from fitness_tracker.services.session_store import SessionStore
from fitness_tracker.services.store import RelationalStore
from fitness_tracker.utils.security import PasswordHasher

TEST_ROUNDS = 1000


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=str(tmp_path),
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        session_file=str(tmp_path / "session.json"),
        password_hash_rounds=TEST_ROUNDS,
        log_level="DEBUG",
    )


@pytest.fixture
def store(settings):
    s = RelationalStore(settings.database_url)
    s.init_schema()
    yield s
    s.dispose()


@pytest.fixture
def sessions(settings):
    return SessionStore(settings.session_file)


@pytest.fixture
def hasher():
    return PasswordHasher(TEST_ROUNDS)


@pytest.fixture
def service(store, sessions, hasher):
    return AccountService(store=store, sessions=sessions, hasher=hasher)


@pytest.fixture
def client(settings, service):
    app = create_app(settings, service=service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_user_data():
    return {
        "email": "alice@test.com",
        "password": "Passw0rd!",
        "full_name": "Alice A",
    }


@pytest.fixture
def alice(service, sample_user_data):
    """가입 완료된 사용자 (세션도 생성된 상태)"""
    return service.register(**sample_user_data)


@pytest.fixture
def bob(service):
    return service.register("bob@test.com", "Secr3tPass", "Bob B")


@pytest.fixture
def count_rows(store):
    """사용자 소유 테이블의 행 수: count_rows(Model, user_id)"""
    def _count(model, user_id):
        with store.SessionLocal() as db:
            stmt = select(func.count()).select_from(model).where(model.user_id == user_id)
            return int(db.execute(stmt).scalar_one())
    return _count


@pytest.fixture
def count_logs(store):
    """(activity_id, log_date) 로그 행 수"""
    def _count(activity_id, log_date):
        with store.SessionLocal() as db:
            stmt = select(func.count(ActivityLog.id)).where(
                ActivityLog.activity_id == activity_id,
                ActivityLog.log_date == datetime.date.fromisoformat(log_date),
            )
            return int(db.execute(stmt).scalar_one())
    return _count
