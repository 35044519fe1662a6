"""
로그인 세션 저장소.

관계형 DB 와 별개로 로컬 JSON 파일(키-값)에 "현재 로그인한 사용자"를 보관해
프로세스 재시작 후에도 로그인 상태를 유지한다.
"""
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SESSION_KEY = "@fitness_tracker_session"


class JsonKeyValueStore:
    """파일 하나에 {key: value} JSON 문서를 저장하는 단순 키-값 저장소."""

    def __init__(self, path: str):
        self.path = path
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        # 임시 파일에 쓴 뒤 교체 (중간에 끊겨도 기존 파일 유지)
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set_item(self, key: str, value: Any) -> None:
        try:
            data = self._load()
        except (OSError, ValueError):
            logger.warning(f"session file unreadable, overwriting: {self.path}")
            data = {}
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        try:
            data = self._load()
        except (OSError, ValueError):
            data = {}
        if key in data:
            del data[key]
        self._dump(data)


class SessionStore:
    def __init__(self, path: str, key: str = SESSION_KEY):
        self.storage = JsonKeyValueStore(path)
        self.key = key

    def create_session(self, user: Dict[str, Any]) -> Dict[str, Any]:
        public = {k: v for k, v in user.items() if k != "password_hash"}
        session = {
            "user": public,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self.storage.set_item(self.key, session)
        logger.info(f"session created: user_id={public.get('id')}")
        return session

    def get_session(self) -> Optional[Dict[str, Any]]:
        try:
            session = self.storage.get_item(self.key)
        except (OSError, ValueError) as e:
            logger.warning(f"session read failed, treating as logged out: {e}")
            return None
        if not isinstance(session, dict) or not isinstance(session.get("user"), dict):
            return None
        return session

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        session = self.get_session()
        return session["user"] if session else None

    def clear_session(self) -> None:
        self.storage.remove_item(self.key)
