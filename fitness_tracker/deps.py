from fastapi import Request

from fitness_tracker.services.account_service import AccountService


def get_service(request: Request) -> AccountService:
    """create_app() 에서 app.state 에 넣어 둔 서비스 인스턴스."""
    return request.app.state.service
