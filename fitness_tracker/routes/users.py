from typing import List

from fastapi import APIRouter, Depends, Query, Response

from fitness_tracker.deps import get_service
from fitness_tracker.schemas.activity_schema import MeasurementCreate, MeasurementOut, WorkoutCreate, WorkoutOut
from fitness_tracker.schemas.responses import IdResponse
from fitness_tracker.schemas.user_schema import AccountDelete, ProfileOut, ProfileUpdate
from fitness_tracker.services.account_service import AccountService

router = APIRouter(prefix="/users/{user_id}", tags=["Users"])

@router.get("/profile", response_model=ProfileOut)
def get_profile(user_id: int, service: AccountService = Depends(get_service)):
    return service.get_profile(user_id)

@router.put("/profile", response_model=ProfileOut)
def update_profile(user_id: int, payload: ProfileUpdate, service: AccountService = Depends(get_service)):
    return service.update_profile(user_id, payload.model_dump(exclude_unset=True))

@router.post("/workouts", response_model=IdResponse, status_code=201)
def log_workout(user_id: int, payload: WorkoutCreate, service: AccountService = Depends(get_service)):
    return {"id": service.log_workout(user_id, payload.model_dump())}

@router.get("/workouts", response_model=List[WorkoutOut])
def list_workouts(
    user_id: int,
    start_date: str = Query(..., description="YYYY-MM-DD"),
    end_date: str = Query(..., description="YYYY-MM-DD"),
    service: AccountService = Depends(get_service),
):
    return service.list_workouts(user_id, start_date, end_date)

@router.post("/measurements", response_model=IdResponse, status_code=201)
def log_measurement(user_id: int, payload: MeasurementCreate, service: AccountService = Depends(get_service)):
    return {"id": service.log_measurement(user_id, payload.model_dump())}

@router.get("/measurements", response_model=List[MeasurementOut])
def list_measurements(user_id: int, limit: int = Query(30, ge=1, le=365),
                      service: AccountService = Depends(get_service)):
    return service.list_measurements(user_id, limit)

@router.delete("/data", status_code=204)
def clear_data(user_id: int, service: AccountService = Depends(get_service)):
    service.clear_user_data(user_id)
    return Response(status_code=204)

@router.delete("", status_code=204)
def delete_account(user_id: int, payload: AccountDelete, service: AccountService = Depends(get_service)):
    service.delete_account(user_id, payload.current_password)
    return Response(status_code=204)
