from fastapi import APIRouter, Depends

from fitness_tracker.deps import get_service
from fitness_tracker.schemas.responses import MessageResponse
from fitness_tracker.schemas.user_schema import PasswordChange, UserLogin, UserOut, UserRegister
from fitness_tracker.services.account_service import AccountService

router = APIRouter(prefix="/auth", tags=["Auth"])

@router.post("/register", response_model=UserOut)
def register(payload: UserRegister, service: AccountService = Depends(get_service)):
    return service.register(payload.email, payload.password, payload.full_name)

@router.post("/login", response_model=UserOut)
def login(payload: UserLogin, service: AccountService = Depends(get_service)):
    return service.login(payload.email, payload.password)

@router.post("/logout", response_model=MessageResponse)
def logout(service: AccountService = Depends(get_service)):
    service.logout()
    return {"message": "logged out"}

@router.get("/me", response_model=UserOut | None)
def current_user(service: AccountService = Depends(get_service)):
    return service.get_current_user()

@router.post("/password", response_model=MessageResponse)
def change_password(payload: PasswordChange, service: AccountService = Depends(get_service)):
    service.change_password(payload.user_id, payload.current_password, payload.new_password)
    return {"message": "password changed"}
