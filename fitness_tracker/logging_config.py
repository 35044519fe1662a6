"""로깅 초기화 (create_app 에서 1회 호출)."""
import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    log_level = getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # uvicorn 접근 로그도 같은 레벨
    logging.getLogger("uvicorn.access").setLevel(log_level)
