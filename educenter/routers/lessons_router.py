# /educenter/routers/lessons_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import any_role, staff_only, staff_or_teacher, teacher_only
from ..core.permissions import Principal
from ..models import common_model, lesson_model
from ..services import database_service, lesson_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


@router.post("", response_model=lesson_model.LessonRead, status_code=status.HTTP_201_CREATED, summary="Open Today's Lesson")
def create_lesson(payload: lesson_model.LessonCreate, db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return lesson_service.create_lesson(db, payload, principal)


@router.get("/all", response_model=List[lesson_model.LessonRead], summary="List All Lessons")
def list_lessons(db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return lesson_service.list_lessons(db)


@router.get("/statistics", response_model=List[lesson_model.LessonStatistics], summary="Attendance Statistics per Lesson")
def lesson_statistics(
    group_id: Optional[int] = Query(None, alias="groupId"),
    date: Optional[str] = None,
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return lesson_service.lesson_statistics(db, group_id, date)


@router.get("/group/{group_id}", response_model=List[lesson_model.LessonRead], summary="Lessons of a Group")
def group_lessons(group_id: int, date: Optional[str] = None, db: DB = Depends(get_db), principal: Principal = Depends(any_role)):
    return lesson_service.list_group_lessons(db, group_id, principal, date)


@router.get("/{lesson_id}/attendance-history", response_model=lesson_model.LessonWithAttendance, summary="Attendance of a Lesson")
def lesson_attendance_history(lesson_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return lesson_service.lesson_attendance_history(db, lesson_id)


@router.put("/{lesson_id}", response_model=lesson_model.LessonRead, summary="Rename a Lesson")
def update_lesson(lesson_id: int, payload: lesson_model.LessonUpdate, db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return lesson_service.update_lesson(db, lesson_id, payload, principal)


@router.delete("/{lesson_id}", response_model=common_model.MessageResponse, summary="Delete a Lesson")
def delete_lesson(lesson_id: int, db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return lesson_service.delete_lesson(db, lesson_id, principal)
