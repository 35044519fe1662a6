import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_HASH_ROUNDS = 120_000


@dataclass
class Settings:
    data_dir: str
    database_url: str
    session_file: str
    password_hash_rounds: int = DEFAULT_HASH_ROUNDS
    log_level: str = "INFO"


def load_settings(data_dir: Optional[str] = None) -> Settings:
    """
    환경변수 기반 설정 로드.
    우선순위: 인자 > 환경변수 > 기본값(./data 아래 sqlite 파일 + session.json)
    """
    data_dir = data_dir or os.getenv("TRACKER_DATA_DIR", os.path.join(os.getcwd(), "data"))
    os.makedirs(data_dir, exist_ok=True)

    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        db_url = f"sqlite:///{os.path.join(data_dir, 'fitness_tracker.db')}"

    return Settings(
        data_dir=data_dir,
        database_url=db_url,
        session_file=os.getenv("SESSION_FILE", os.path.join(data_dir, "session.json")),
        password_hash_rounds=int(os.getenv("PASSWORD_HASH_ROUNDS", str(DEFAULT_HASH_ROUNDS))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
