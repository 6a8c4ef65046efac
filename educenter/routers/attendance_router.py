# /educenter/routers/attendance_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import any_role, staff_only, staff_or_teacher, teacher_only
from ..core.permissions import Principal
from ..models import attendance_model, common_model
from ..services import attendance_service, database_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


# --- MARKING ENDPOINTS ---

@router.post("", response_model=attendance_model.AttendanceBatchResult, status_code=status.HTTP_201_CREATED,
             summary="Record Attendance for a Group and Date")
def create_attendance(payload: attendance_model.AttendanceBatch, db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return attendance_service.create_attendance(db, payload, principal)


@router.put("", response_model=attendance_model.AttendanceBatchResult, summary="Record or Overwrite Attendance")
def create_or_update_attendance(payload: attendance_model.AttendanceBatch, db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return attendance_service.create_or_update_attendance(db, payload, principal)


@router.patch("/group/{group_id}/date/{date}", response_model=attendance_model.AttendanceBatchResult,
              summary="Bulk Update Attendance of a Group and Date")
def bulk_update_attendance(
    group_id: int,
    date: str,
    payload: attendance_model.AttendanceBulkUpdate,
    db: DB = Depends(get_db),
    principal: Principal = Depends(teacher_only),
):
    return attendance_service.bulk_update_attendance(db, group_id, date, payload.attendances, principal)


@router.post("/teacher", response_model=attendance_model.TeacherAttendanceRead, status_code=status.HTTP_201_CREATED,
             summary="Mark a Teacher Absent")
def mark_teacher_attendance(payload: attendance_model.TeacherAttendanceCreate, db: DB = Depends(get_db), principal: Principal = Depends(staff_only)):
    return attendance_service.mark_teacher_attendance(db, payload, principal)


@router.get("/teacher", response_model=List[attendance_model.TeacherAttendanceRead], summary="List Teacher Attendance")
def list_teacher_attendance(
    group_id: Optional[int] = Query(None, alias="groupId"),
    date: Optional[str] = None,
    teacher_id: Optional[int] = Query(None, alias="teacherId"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return attendance_service.list_teacher_attendances(db, group_id=group_id, date_value=date, teacher_id=teacher_id)


# --- REPORTING ENDPOINTS ---

@router.get("", response_model=List[attendance_model.AttendanceRead], summary="List All Attendance")
def list_attendance(db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return attendance_service.list_attendances(db)


@router.get("/missing", response_model=List[attendance_model.MissingAttendance], summary="Groups Without Attendance")
def missing_attendance(date: Optional[str] = None, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return attendance_service.groups_without_attendance(db, date)


@router.get("/statistics", response_model=List[attendance_model.StudentAttendanceStats], summary="Attendance Statistics per Student")
def attendance_statistics(group_id: Optional[int] = Query(None, alias="groupId"), db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return attendance_service.attendance_statistics(db, group_id)


@router.get("/history", response_model=attendance_model.AttendanceHistory, summary="Attendance History of a Group and Date")
def attendance_history(
    group_id: int = Query(..., alias="groupId"),
    date: str = Query(...),
    db: DB = Depends(get_db),
    principal: Principal = Depends(any_role),
):
    return attendance_service.attendance_history(db, group_id, date, principal)


@router.get("/group/{group_id}", response_model=List[attendance_model.AttendanceRead], summary="Attendance of a Group")
def group_attendance(group_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return attendance_service.list_attendances(db, group_id)


@router.get("/daily/{group_id}", response_model=attendance_model.DailyAttendance, summary="Daily Attendance of a Group")
def daily_attendance(
    group_id: int,
    date: Optional[str] = None,
    student_name: Optional[str] = Query(None, alias="studentName"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_or_teacher),
):
    return attendance_service.daily_attendance(db, group_id, date, student_name)


# --- INDIVIDUAL RECORD ENDPOINTS ---

@router.get("/{attendance_id}", response_model=attendance_model.AttendanceRead, summary="Get a Single Attendance Record")
def get_attendance(attendance_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return attendance_service.get_attendance(db, attendance_id)


@router.delete("/{attendance_id}", response_model=common_model.MessageResponse, summary="Delete an Attendance Record")
def delete_attendance(attendance_id: int, db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return attendance_service.delete_attendance(db, attendance_id, principal)
