# /educenter/services/database_helpers/catalog_repository_sql.py

"""
SQLAlchemy queries for courses, groups and group rosters.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from educenter.db.models.catalog_models import Course, Group
from educenter.db.models.user_models import User, group_students

from .user_repository_sql import name_filter


class CatalogRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Course Methods ---

    def get_course_by_id(self, course_id: int) -> Optional[Course]:
        return self.db.query(Course).filter(Course.id == course_id).first()

    def get_course_by_name(self, name: str) -> Optional[Course]:
        return self.db.query(Course).filter(Course.name == name).first()

    def get_courses(self, name: Optional[str] = None) -> List[Course]:
        query = self.db.query(Course).options(
            selectinload(Course.groups).selectinload(Group.students)
        )
        if name:
            query = query.filter(Course.name.ilike(f"%{name.strip()}%"))
        return query.order_by(Course.id).all()

    def count_courses(self) -> int:
        return self.db.query(Course).count()

    def add_course(self, record: Dict) -> Course:
        course = Course(**record)
        self.db.add(course)
        self.db.flush()
        return course

    def update_course(self, course: Course, data: Dict) -> Course:
        for key, value in data.items():
            setattr(course, key, value)
        self.db.flush()
        return course

    def delete_course(self, course: Course) -> None:
        self.db.delete(course)
        self.db.flush()

    # --- Group Methods ---

    def get_group_by_id(self, group_id: int) -> Optional[Group]:
        return (
            self.db.query(Group)
            .options(selectinload(Group.students), selectinload(Group.course), selectinload(Group.teacher))
            .filter(Group.id == group_id)
            .first()
        )

    def get_group_for_update(self, group_id: int) -> Optional[Group]:
        """Fetches a group with its row locked so the roster can change safely."""
        return self.db.query(Group).filter(Group.id == group_id).with_for_update().first()

    def get_group_by_name_and_course(self, name: str, course_id: int) -> Optional[Group]:
        return self.db.query(Group).filter(Group.name == name, Group.course_id == course_id).first()

    def get_groups(
        self,
        status: Optional[str] = None,
        name: Optional[str] = None,
        teacher_name: Optional[str] = None,
        course_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> List[Group]:
        query = self.db.query(Group).options(
            selectinload(Group.students), selectinload(Group.course), selectinload(Group.teacher)
        )
        if status:
            query = query.filter(Group.status == status)
        if name:
            query = query.filter(Group.name.ilike(f"%{name.strip()}%"))
        if teacher_name:
            query = query.join(User, Group.teacher_id == User.id).filter(
                name_filter(User.first_name, User.last_name, teacher_name)
            )
        if course_id:
            query = query.filter(Group.course_id == course_id)
        if teacher_id:
            query = query.filter(Group.teacher_id == teacher_id)
        return query.order_by(Group.created_at.desc(), Group.id.desc()).all()

    def get_groups_of_student(self, username: str, status: Optional[str] = "active") -> List[Group]:
        query = (
            self.db.query(Group)
            .join(group_students, group_students.c.group_id == Group.id)
            .join(User, group_students.c.user_id == User.id)
            .options(selectinload(Group.course), selectinload(Group.teacher), selectinload(Group.students))
            .filter(User.username == username)
        )
        if status:
            query = query.filter(Group.status == status)
        return query.order_by(Group.id).all()

    def get_teacher_ids_of_student(self, user_id: int) -> List[int]:
        rows = (
            self.db.query(Group.teacher_id)
            .join(group_students, group_students.c.group_id == Group.id)
            .filter(group_students.c.user_id == user_id, Group.teacher_id.isnot(None))
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

    def get_active_group_revenue_rows(self, teacher_id: int) -> List[Tuple[int, object, int]]:
        """(group id, price, enrolled count) for every active group of a teacher."""
        return (
            self.db.query(Group.id, Group.price, func.count(group_students.c.user_id))
            .outerjoin(group_students, group_students.c.group_id == Group.id)
            .filter(Group.teacher_id == teacher_id, Group.status == "active")
            .group_by(Group.id, Group.price)
            .all()
        )

    def count_groups(self, status: Optional[str] = None) -> int:
        query = self.db.query(Group)
        if status:
            query = query.filter(Group.status == status)
        return query.count()

    def count_distinct_students_in_active_groups(self) -> int:
        return (
            self.db.query(func.count(func.distinct(group_students.c.user_id)))
            .join(Group, Group.id == group_students.c.group_id)
            .filter(Group.status == "active")
            .scalar()
        ) or 0

    def get_student_ids_in_active_groups(self) -> List[int]:
        rows = (
            self.db.query(group_students.c.user_id)
            .join(Group, Group.id == group_students.c.group_id)
            .filter(Group.status == "active")
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

    def add_group(self, record: Dict) -> Group:
        group = Group(**record)
        self.db.add(group)
        self.db.flush()
        return group

    def update_group(self, group: Group, data: Dict) -> Group:
        for key, value in data.items():
            setattr(group, key, value)
        self.db.flush()
        return group

    def delete_group(self, group: Group) -> None:
        self.db.delete(group)
        self.db.flush()

    # --- Roster Methods ---

    def add_student_to_group(self, group: Group, student: User) -> None:
        group.students.append(student)
        self.db.flush()

    def remove_student_from_group(self, group: Group, student: User) -> None:
        group.students.remove(student)
        self.db.flush()

    def replace_roster(self, group: Group, students: List[User]) -> None:
        group.students = list(students)
        self.db.flush()
