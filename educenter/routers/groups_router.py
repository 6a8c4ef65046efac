# /educenter/routers/groups_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import any_role, staff_only, staff_or_teacher, teacher_only
from ..core.permissions import Principal
from ..models import common_model, group_model, user_model
from ..services import database_service, enrollment_service, group_service

router = APIRouter()

DB = database_service.DatabaseService
get_db = database_service.get_db_service


# --- GROUP COLLECTION ENDPOINTS (/groups) ---

@router.post("", response_model=group_model.GroupRead, status_code=status.HTTP_201_CREATED, summary="Create a Group")
def create_group(payload: group_model.GroupCreate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return group_service.create_group(db, payload)


@router.get("", response_model=group_model.GroupListResponse, summary="List Active Groups with Statistics")
def list_groups(search: Optional[str] = None, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return group_service.list_groups(db, search=search)


@router.get("/my/teacher/groups", response_model=group_model.TeacherGroupsResponse, summary="Groups of the Calling Teacher")
def my_teacher_groups(db: DB = Depends(get_db), principal: Principal = Depends(teacher_only)):
    return group_service.get_teacher_groups(db, principal.id)


@router.get("/my/schedule", response_model=List[group_model.TeacherSchedule], summary="Monthly Schedule of the Calling Teacher")
def my_schedule(
    month: Optional[int] = None,
    year: Optional[int] = None,
    db: DB = Depends(get_db),
    principal: Principal = Depends(teacher_only),
):
    return group_service.get_teacher_schedule(db, principal.id, month=month, year=year)


@router.get("/search", response_model=List[group_model.GroupRead], summary="Search Active Groups")
def search_groups(
    name: Optional[str] = None,
    teacher_name: Optional[str] = Query(None, alias="teacherName"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_or_teacher),
):
    return group_service.search_groups(db, name=name, teacher_name=teacher_name)


@router.post("/transfer-student", response_model=group_model.TransferResult, summary="Move a Student Between Groups")
def transfer_student(
    from_group_id: int = Query(..., alias="fromGroupId"),
    to_group_id: int = Query(..., alias="toGroupId"),
    user_id: int = Query(..., alias="userId"),
    db: DB = Depends(get_db),
    _: Principal = Depends(staff_only),
):
    return enrollment_service.transfer_student(db, from_group_id, to_group_id, user_id)


@router.get("/student/{username}", response_model=List[group_model.GroupRead], summary="Active Groups of a Student")
def groups_of_student(username: str, db: DB = Depends(get_db), _: Principal = Depends(any_role)):
    return group_service.get_groups_of_student(db, username)


@router.get("/course/{course_id}", response_model=List[group_model.GroupRead], summary="Active Groups of a Course")
def groups_of_course(course_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return group_service.get_groups_by_course(db, course_id)


# --- ENROLLMENT ENDPOINTS (/groups/{group_id}/...) ---

@router.post("/{group_id}/add-student", response_model=group_model.GroupRead, summary="Enroll a Student")
def add_student(group_id: int, user_id: int = Query(..., alias="userId"), db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return enrollment_service.add_student(db, group_id, user_id)


@router.post("/{group_id}/restore-student", response_model=group_model.GroupRead, summary="Re-enroll a Removed Student")
def restore_student(group_id: int, user_id: int = Query(..., alias="userId"), db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return enrollment_service.restore_student(db, group_id, user_id)


@router.delete("/{group_id}/remove-student", response_model=common_model.SalaryChange, summary="Remove a Student")
def remove_student(group_id: int, user_id: int = Query(..., alias="userId"), db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return enrollment_service.remove_student(db, group_id, user_id)


@router.get("/{group_id}/students", response_model=List[group_model.PersonBrief], summary="Students of an Active Group")
def active_group_students(group_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return group_service.get_active_group_students(db, group_id)


@router.get("/{group_id}/students/list", response_model=List[user_model.StudentBrief], summary="Student List of a Group")
def group_students_list(group_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_or_teacher)):
    return [
        user_model.StudentBrief(id=s.id, full_name=s.full_name, phone=s.phone)
        for s in group_service.get_group_students(db, group_id)
    ]


# --- INDIVIDUAL GROUP ENDPOINTS (/groups/{group_id}) ---

@router.patch("/{group_id}/status/{new_status}", response_model=group_model.GroupRead, summary="Change Group Status")
def update_group_status(group_id: int, new_status: str, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return group_service.update_status(db, group_id, new_status)


@router.put("/{group_id}", response_model=group_model.GroupRead, summary="Update a Group")
def update_group(group_id: int, payload: group_model.GroupUpdate, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return group_service.update_group(db, group_id, payload)


@router.delete("/{group_id}", response_model=common_model.SalaryChange, summary="Delete a Group")
def delete_group(group_id: int, db: DB = Depends(get_db), _: Principal = Depends(staff_only)):
    return group_service.delete_group(db, group_id)


@router.get("/{group_id}", response_model=group_model.GroupRead, summary="Get a Single Group")
def get_group(group_id: int, db: DB = Depends(get_db), _: Principal = Depends(any_role)):
    return group_service.get_group(db, group_id)
