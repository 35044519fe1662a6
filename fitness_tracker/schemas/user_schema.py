from typing import Optional
from pydantic import BaseModel, ConfigDict, constr

class UserRegister(BaseModel):
    # 세부 규칙(이메일 형식, 비밀번호 강도)은 AccountService 에서 검증
    email: str
    password: str
    full_name: str

class UserLogin(BaseModel):
    email: str
    password: str

class PasswordChange(BaseModel):
    user_id: int
    current_password: str
    new_password: str

class AccountDelete(BaseModel):
    current_password: str

class UserOut(BaseModel):
    id: int
    email: str
    full_name: str
    created_at: Optional[str] = None

class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    gender: Optional[constr(max_length=20)] = None
    fitness_goal: Optional[str] = None

class ProfileOut(BaseModel):
    user_id: int
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    gender: Optional[str] = None
    fitness_goal: Optional[str] = None
