# /educenter/routers/courses_router.py

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..core.deps import staff_only, staff_or_teacher
from ..core.permissions import Principal
from ..models import common_model, course_model
from ..services import course_service, database_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


@router.post("", response_model=course_model.CourseRead, status_code=status.HTTP_201_CREATED, summary="Create a Course")
def create_course(payload: course_model.CourseCreate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return course_service.create_course(db, payload)


@router.get("", response_model=course_model.CourseListResponse, summary="List Courses with Statistics")
def list_courses(name: Optional[str] = None, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return course_service.list_courses(db, name=name)


@router.get("/{course_id}", response_model=course_model.CourseRead, summary="Get a Single Course")
def get_course(course_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return course_service.get_course(db, course_id)


@router.put("/{course_id}", response_model=course_model.CourseRead, summary="Update a Course")
def update_course(course_id: int, payload: course_model.CourseUpdate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return course_service.update_course(db, course_id, payload)


@router.delete("/{course_id}", response_model=common_model.MessageResponse, summary="Delete a Course")
def delete_course(course_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return course_service.delete_course(db, course_id)
