from typing import List, Optional


class TrackerError(Exception):
    """코어 계층에서 호출자에게 전달되는 모든 오류의 기반 클래스."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class DuplicateEmail(TrackerError):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class InvalidCredentials(TrackerError):
    # 이메일 미존재 / 비밀번호 불일치 모두 같은 메시지
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class NotFound(TrackerError):
    pass


class StorageError(TrackerError):
    pass
