# /tests/test_compensation_service.py

from decimal import Decimal

from educenter.services import compensation_service, enrollment_service, group_service
from educenter.models.group_model import GroupUpdate


def test_salary_is_percent_of_expected_tuition(db, factory):
    teacher = factory.teacher(percent=10)
    students = [factory.student() for _ in range(4)]
    factory.group(teacher=teacher, price=50000, students=students)

    assert compensation_service.compute_teacher_salary(db, teacher.id) == Decimal("20000.00")


def test_removing_a_student_recomputes_the_stored_salary(db, factory):
    teacher = factory.teacher(percent=10)
    students = [factory.student() for _ in range(4)]
    group = factory.group(teacher=teacher, price=50000, students=students)
    with db.transaction():
        compensation_service.refresh_teacher_salary(db, teacher.id)
    assert db.get_user_by_id(teacher.id).salary == Decimal("20000")

    result = enrollment_service.remove_student(db, group.id, students[0].id)

    assert result.teacher_salary == Decimal("15000.00")
    assert db.get_user_by_id(teacher.id).salary == Decimal("15000")


def test_only_active_groups_count(db, factory):
    teacher = factory.teacher(percent=20)
    factory.group(teacher=teacher, price=10000, students=[factory.student()])
    factory.group(teacher=teacher, price=99999, students=[factory.student()], status="completed")

    assert compensation_service.compute_teacher_salary(db, teacher.id) == Decimal("2000.00")


def test_rounding_is_half_up_to_cents(db, factory):
    teacher = factory.teacher(percent=Decimal("12.5"))
    factory.group(teacher=teacher, price=Decimal("0.05"), students=[factory.student()])

    # 12.5% of 0.05 = 0.00625 -> 0.01
    assert compensation_service.compute_teacher_salary(db, teacher.id) == Decimal("0.01")


def test_teacher_without_percent_earns_nothing(db, factory):
    teacher = factory.teacher(percent=0)
    factory.group(teacher=teacher, price=50000, students=[factory.student()])

    assert compensation_service.compute_teacher_salary(db, teacher.id) == Decimal("0")


def test_non_teacher_keeps_stored_salary(db, factory):
    admin = factory.admin(salary=Decimal("3000000"))

    assert compensation_service.compute_teacher_salary(db, admin.id) == Decimal("3000000.00")
    with db.transaction():
        assert compensation_service.refresh_teacher_salaries(db, [admin.id]) == {}


def test_status_change_and_reassignment_refresh_both_teachers(db, factory):
    old_teacher = factory.teacher(percent=10)
    new_teacher = factory.teacher(percent=50)
    group = factory.group(teacher=old_teacher, price=1000, students=[factory.student(), factory.student()])
    with db.transaction():
        compensation_service.refresh_teacher_salary(db, old_teacher.id)
    assert db.get_user_by_id(old_teacher.id).salary == Decimal("200")

    read = group_service.update_group(db, group.id, GroupUpdate(teacher_id=new_teacher.id))

    assert read.teacher_salary == Decimal("1000.00")
    assert db.get_user_by_id(old_teacher.id).salary == Decimal("0")
    assert db.get_user_by_id(new_teacher.id).salary == Decimal("1000")

    group_service.update_status(db, group.id, "completed")
    assert db.get_user_by_id(new_teacher.id).salary == Decimal("0")
