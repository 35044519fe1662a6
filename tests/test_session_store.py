"""로컬 세션 저장소 테스트"""

from fitness_tracker.services.session_store import SESSION_KEY, SessionStore


USER = {"id": 1, "email": "alice@test.com", "full_name": "Alice A", "created_at": "2024-01-01 00:00:00"}


def test_no_session_by_default(sessions):
    assert sessions.get_current_user() is None


def test_create_and_read(sessions):
    sessions.create_session(USER)
    assert sessions.get_current_user() == USER
    assert "timestamp" in sessions.get_session()


def test_password_hash_is_never_persisted(sessions, settings):
    sessions.create_session({**USER, "password_hash": "salt:digest"})
    assert "password_hash" not in sessions.get_current_user()
    with open(settings.session_file, encoding="utf-8") as f:
        assert "salt:digest" not in f.read()


def test_survives_new_instance(sessions, settings):
    sessions.create_session(USER)
    assert SessionStore(settings.session_file).get_current_user()["id"] == 1


def test_clear_is_idempotent(sessions):
    sessions.clear_session()
    sessions.create_session(USER)
    sessions.clear_session()
    sessions.clear_session()
    assert sessions.get_current_user() is None


def test_corrupt_file_means_no_session(sessions, settings):
    with open(settings.session_file, "w", encoding="utf-8") as f:
        f.write("{not json")
    assert sessions.get_current_user() is None
    # 손상된 파일 위에 새 세션을 쓸 수 있어야 함
    sessions.create_session(USER)
    assert sessions.get_current_user() == USER


def test_record_without_user_object(sessions):
    sessions.storage.set_item(SESSION_KEY, {"timestamp": "x"})
    assert sessions.get_current_user() is None
