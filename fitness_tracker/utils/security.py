import secrets
from typing import Optional

from passlib.crypto.digest import pbkdf2_hmac
from passlib.utils import consteq

from fitness_tracker.config import DEFAULT_HASH_ROUNDS

SALT_BYTES = 16
KEY_BYTES = 32
DELIMITER = ":"


def generate_salt() -> str:
    """16바이트 CSPRNG 난수를 hex 문자열(32자)로 반환."""
    return secrets.token_hex(SALT_BYTES)


def hash_password(plain: str, salt: str, rounds: int = DEFAULT_HASH_ROUNDS) -> str:
    """
    PBKDF2-HMAC-SHA256 (plain + salt, rounds 회 반복) 결과를 hex 로 반환.
    rounds 가 작업량(work factor).
    """
    if not isinstance(plain, str):
        plain = str(plain)
    key = pbkdf2_hmac("sha256", plain.encode("utf-8"), salt.encode("utf-8"), rounds, KEY_BYTES)
    return key.hex()


def verify_password(plain: str, stored: Optional[str], rounds: int = DEFAULT_HASH_ROUNDS) -> bool:
    """
    저장 문자열 'salt:digest' 를 분리해 다시 계산한 값과 상수시간 비교.
    형식이 잘못된 경우 예외 없이 False.
    """
    if not isinstance(stored, str) or not isinstance(plain, str):
        return False
    parts = stored.split(DELIMITER)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return False
    salt, digest = parts
    computed = hash_password(plain, salt, rounds)
    return consteq(computed.encode("ascii"), digest.lower().encode("utf-8"))


class PasswordHasher:
    """작업량(rounds)을 들고 다니는 해셔. AccountService 에 주입해서 사용."""

    def __init__(self, rounds: int = DEFAULT_HASH_ROUNDS):
        if rounds < 1:
            raise ValueError("rounds must be positive")
        self.rounds = rounds
        # 사용자 조회 실패 시 응답 시간을 맞추기 위한 더미 자격증명
        self._dummy = self.make_credential(secrets.token_urlsafe(16))

    def make_credential(self, plain: str) -> str:
        salt = generate_salt()
        return f"{salt}{DELIMITER}{hash_password(plain, salt, self.rounds)}"

    def verify(self, plain: str, stored: Optional[str]) -> bool:
        return verify_password(plain, stored, self.rounds)

    def dummy_verify(self, plain: str) -> None:
        verify_password(plain, self._dummy, self.rounds)
