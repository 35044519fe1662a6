"""
AccountService 테스트: 가입 / 로그인 / 세션 / 비밀번호 변경 / 활동 기록 / 통계.
"""

import pytest

from fitness_tracker.exceptions import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from fitness_tracker.models import Activity, ActivityLog, BodyMeasurement, UserProfile, WorkoutSession
from fitness_tracker.utils import security


class TestRegistration:
    def test_register_example_user(self, service, store, alice):
        assert alice["email"] == "alice@test.com"
        assert alice["full_name"] == "Alice A"
        assert "password_hash" not in alice
        assert len(service.list_activities(alice["id"])) == 7
        assert store.get_user_profile(alice["id"]) is not None

    def test_register_creates_session(self, service, alice):
        assert service.is_authenticated
        assert service.get_current_user()["id"] == alice["id"]

    def test_password_is_hashed(self, store, alice, sample_user_data):
        stored = store.get_password_hash(alice["id"])
        salt, digest = stored.split(":")
        assert sample_user_data["password"] not in stored
        assert len(salt) == 32 and len(digest) == 64

    def test_email_is_normalized(self, service):
        user = service.register("  Carol@Example.COM ", "Passw0rd!", "Carol C")
        assert user["email"] == "carol@example.com"
        assert service.login("CAROL@example.com", "Passw0rd!")["id"] == user["id"]

    def test_duplicate_email_case_insensitive(self, service, alice):
        with pytest.raises(DuplicateEmail):
            service.register("ALICE@test.com", "Passw0rd!", "Other Alice")

    @pytest.mark.parametrize("email", ["alice", "alice@test", "a@b@test.com"])
    def test_invalid_email(self, service, email):
        with pytest.raises(ValidationError):
            service.register(email, "Passw0rd!", "Alice A")

    @pytest.mark.parametrize("password", ["short1A", "password1", "PASSWORD1", "Password"])
    def test_weak_password(self, service, password):
        with pytest.raises(ValidationError):
            service.register("weak@test.com", password, "Weak W")

    def test_short_name(self, service):
        with pytest.raises(ValidationError):
            service.register("name@test.com", "Passw0rd!", "A")

    def test_failed_registration_creates_nothing(self, service, store):
        with pytest.raises(ValidationError):
            service.register("name@test.com", "weak", "Name N")
        assert store.get_user_by_email("name@test.com") is None
        assert service.get_current_user() is None


class TestLogin:
    def test_register_then_login_same_id(self, service, alice, sample_user_data):
        service.logout()
        user = service.login(sample_user_data["email"], sample_user_data["password"])
        assert user["id"] == alice["id"]
        assert "password_hash" not in user
        assert service.get_current_user()["id"] == alice["id"]

    def test_wrong_password(self, service, alice):
        with pytest.raises(InvalidCredentials):
            service.login("alice@test.com", "wrongpass")

    def test_unknown_and_wrong_password_are_indistinguishable(self, service, alice):
        with pytest.raises(InvalidCredentials) as wrong:
            service.login("alice@test.com", "Wr0ngPassword")
        with pytest.raises(InvalidCredentials) as unknown:
            service.login("nobody@test.com", "Wr0ngPassword")
        assert type(wrong.value) is type(unknown.value)
        assert str(wrong.value) == str(unknown.value)

    def test_unknown_email_still_derives_a_hash(self, service, monkeypatch):
        calls = []
        original = security.hash_password
        monkeypatch.setattr(security, "hash_password", lambda *a, **k: calls.append(1) or original(*a, **k))
        with pytest.raises(InvalidCredentials):
            service.login("nobody@test.com", "Passw0rd!")
        assert len(calls) == 1

    def test_failed_login_keeps_anonymous(self, service, alice):
        service.logout()
        with pytest.raises(InvalidCredentials):
            service.login("alice@test.com", "wrongpass")
        assert not service.is_authenticated


class TestLogout:
    def test_logout(self, service, alice):
        service.logout()
        assert service.get_current_user() is None

    def test_logout_without_session(self, service):
        service.logout()
        service.logout()
        assert not service.is_authenticated


class TestChangePassword:
    def test_change_password(self, service, alice):
        assert service.change_password(alice["id"], "Passw0rd!", "N3wPassword")
        with pytest.raises(InvalidCredentials):
            service.login("alice@test.com", "Passw0rd!")
        assert service.login("alice@test.com", "N3wPassword")["id"] == alice["id"]

    def test_wrong_current_password(self, service, alice):
        with pytest.raises(InvalidCredentials):
            service.change_password(alice["id"], "nope", "N3wPassword")

    def test_weak_new_password(self, service, alice):
        with pytest.raises(ValidationError):
            service.change_password(alice["id"], "Passw0rd!", "weak")
        assert service.login("alice@test.com", "Passw0rd!")

    def test_unknown_user(self, service):
        with pytest.raises(NotFound):
            service.change_password(999, "Passw0rd!", "N3wPassword")


class TestProfile:
    def test_update_profile(self, service, alice):
        profile = service.update_profile(alice["id"], {"age": 31, "weight": 60.0, "fitness_goal": "5k"})
        assert profile["age"] == 31
        assert service.get_profile(alice["id"])["fitness_goal"] == "5k"

    def test_unknown_field(self, service, alice):
        with pytest.raises(ValidationError):
            service.update_profile(alice["id"], {"password_hash": "x"})

    def test_unknown_user(self, service):
        with pytest.raises(NotFound):
            service.update_profile(999, {"age": 20})


class TestActivities:
    def test_example_log_twice_keeps_last(self, service, store, alice, count_logs):
        # 첫 사용자의 다섯 번째 기본 활동
        assert alice["id"] == 1
        service.log_activity(1, 5, "2024-01-01", True)
        service.log_activity(1, 5, "2024-01-01", False)
        assert count_logs(5, "2024-01-01") == 1
        assert service.get_today_logs(1, "2024-01-01") == {
            5: {"completed": False, "actual_value": None, "notes": None}
        }

    def test_log_true_twice(self, service, store, alice, count_logs):
        aid = service.list_activities(alice["id"])[0]["id"]
        service.log_activity(alice["id"], aid, "2024-01-01", True)
        service.log_activity(alice["id"], aid, "2024-01-01", True)
        assert count_logs(aid, "2024-01-01") == 1
        assert service.get_today_logs(alice["id"], "2024-01-01")[aid]["completed"] is True

    def test_create_update_delete(self, service, alice):
        created = service.create_activity(alice["id"], {"name": " Plank ", "target_value": 3,
                                                        "target_unit": "minutes", "category": "exercise"})
        assert created["name"] == "Plank"
        updated = service.update_activity(alice["id"], created["id"], {"target_value": 5})
        assert updated["target_value"] == 5
        assert updated["name"] == "Plank"

        service.delete_activity(alice["id"], created["id"])
        assert created["id"] not in [a["id"] for a in service.list_activities(alice["id"])]
        with pytest.raises(NotFound):
            service.log_activity(alice["id"], created["id"], "2024-01-01", True)

    def test_blank_name_rejected(self, service, alice):
        with pytest.raises(ValidationError):
            service.create_activity(alice["id"], {"name": "   "})

    def test_cannot_touch_other_users_activity(self, service, alice, bob):
        alice_activity = service.list_activities(alice["id"])[0]["id"]
        with pytest.raises(NotFound):
            service.log_activity(bob["id"], alice_activity, "2024-01-01", True)
        with pytest.raises(NotFound):
            service.delete_activity(bob["id"], alice_activity)
        with pytest.raises(NotFound):
            service.update_activity(bob["id"], alice_activity, {"name": "mine"})

    def test_bad_date(self, service, alice):
        aid = service.list_activities(alice["id"])[0]["id"]
        with pytest.raises(ValidationError):
            service.log_activity(alice["id"], aid, "01/02/2024", True)


class TestStats:
    def test_empty_range_gives_zero(self, service, alice):
        stats = service.get_stats(alice["id"], "2024-01-01", "2024-01-07")
        assert len(stats) == 7
        assert all(s["total_count"] == 0 and s["completion_rate"] == 0.0 for s in stats)

    def test_completion_rate(self, service, alice):
        aid = service.list_activities(alice["id"])[0]["id"]
        service.log_activity(alice["id"], aid, "2024-01-01", True)
        service.log_activity(alice["id"], aid, "2024-01-02", False)
        stat = next(s for s in service.get_stats(alice["id"], "2024-01-01", "2024-01-07")
                    if s["activity_id"] == aid)
        assert (stat["completed_count"], stat["total_count"], stat["completion_rate"]) == (1, 2, 50.0)

    def test_reversed_range(self, service, alice):
        with pytest.raises(ValidationError):
            service.get_stats(alice["id"], "2024-01-07", "2024-01-01")


class TestWorkoutsAndMeasurements:
    def test_log_and_list_workouts(self, service, alice):
        service.log_workout(alice["id"], {"workout_type": "run", "session_date": "2024-01-01",
                                          "duration_minutes": 40, "calories_burned": 400.0})
        rows = service.list_workouts(alice["id"], "2024-01-01", "2024-01-01")
        assert rows[0]["duration_minutes"] == 40

    def test_workout_requires_type(self, service, alice):
        with pytest.raises(ValidationError):
            service.log_workout(alice["id"], {"workout_type": "", "session_date": "2024-01-01"})

    def test_measurements(self, service, alice):
        service.log_measurement(alice["id"], {"weight": 61.2, "measurement_date": "2024-01-01"})
        assert service.list_measurements(alice["id"])[0]["weight"] == 61.2


class TestAccountDeletion:
    def test_delete_account_cascades_only_own_rows(self, service, store, alice, bob, count_rows):
        for user in (alice, bob):
            aid = service.list_activities(user["id"])[0]["id"]
            service.log_activity(user["id"], aid, "2024-01-01", True)
            service.log_workout(user["id"], {"workout_type": "run", "session_date": "2024-01-01"})
            service.log_measurement(user["id"], {"weight": 70.0, "measurement_date": "2024-01-01"})

        service.delete_account(alice["id"], "Passw0rd!")

        assert store.get_user_by_id(alice["id"]) is None
        for model in (UserProfile, Activity, ActivityLog, WorkoutSession, BodyMeasurement):
            assert count_rows(model, alice["id"]) == 0
            assert count_rows(model, bob["id"]) > 0

    def test_delete_account_clears_own_session(self, service, alice):
        service.logout()
        service.login("alice@test.com", "Passw0rd!")
        service.delete_account(alice["id"], "Passw0rd!")
        assert service.get_current_user() is None

    def test_delete_account_requires_password(self, service, alice):
        with pytest.raises(InvalidCredentials):
            service.delete_account(alice["id"], "wrong")

    def test_clear_user_data_keeps_account(self, service, alice):
        service.clear_user_data(alice["id"])
        assert service.list_activities(alice["id"]) == []
        assert service.login("alice@test.com", "Passw0rd!")["id"] == alice["id"]
