from typing import List

from fastapi import APIRouter, Depends, Query, Response

from fitness_tracker.deps import get_service
from fitness_tracker.schemas.activity_schema import ActivityCreate, ActivityLogIn, ActivityOut, ActivityUpdate
from fitness_tracker.schemas.responses import DayLogsResponse, StatsResponse
from fitness_tracker.services.account_service import AccountService
from fitness_tracker.utils.validators import ensure_date

router = APIRouter(prefix="/users/{user_id}", tags=["Activities"])

@router.get("/activities", response_model=List[ActivityOut])
def list_activities(user_id: int, service: AccountService = Depends(get_service)):
    return service.list_activities(user_id)

@router.post("/activities", response_model=ActivityOut, status_code=201)
def create_activity(user_id: int, payload: ActivityCreate, service: AccountService = Depends(get_service)):
    return service.create_activity(user_id, payload.model_dump())

@router.put("/activities/{activity_id}", response_model=ActivityOut)
def update_activity(user_id: int, activity_id: int, payload: ActivityUpdate,
                    service: AccountService = Depends(get_service)):
    return service.update_activity(user_id, activity_id, payload.model_dump(exclude_unset=True))

@router.delete("/activities/{activity_id}", status_code=204)
def delete_activity(user_id: int, activity_id: int, service: AccountService = Depends(get_service)):
    service.delete_activity(user_id, activity_id)
    return Response(status_code=204)

@router.put("/activities/{activity_id}/logs/{log_date}", status_code=204)
def log_activity(user_id: int, activity_id: int, log_date: str, payload: ActivityLogIn,
                 service: AccountService = Depends(get_service)):
    service.log_activity(user_id, activity_id, log_date, payload.completed, payload.actual_value, payload.notes)
    return Response(status_code=204)

@router.get("/logs/{log_date}", response_model=DayLogsResponse)
def day_logs(user_id: int, log_date: str, service: AccountService = Depends(get_service)):
    logs = service.get_today_logs(user_id, log_date)
    return {"date": ensure_date(log_date), "logs": logs}

@router.get("/stats", response_model=StatsResponse,
            summary="기간별 활동 완료 통계",
            description="활성 활동별 완료 횟수 / 기록 횟수 / 완료율(%)을 반환합니다. 기록이 없으면 완료율 0.")
def stats(
    user_id: int,
    start_date: str = Query(..., description="YYYY-MM-DD"),
    end_date: str = Query(..., description="YYYY-MM-DD"),
    service: AccountService = Depends(get_service),
):
    rows = service.get_stats(user_id, start_date, end_date)
    return {"start_date": ensure_date(start_date), "end_date": ensure_date(end_date), "stats": rows}
