# /tests/test_role_and_archive_services.py

import pytest

from educenter.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from educenter.models.archive_model import ArchiveCreate
from educenter.models.role_model import RoleCreate
from educenter.services import archive_service, role_service


def test_default_roles_are_seeded_once(db):
    role_service.ensure_default_roles(db)

    assert sorted(r.name for r in role_service.list_roles(db)) == ["admin", "student", "superAdmin", "teacher"]


def test_role_rules(db, factory, as_principal):
    admin = as_principal(factory.admin())
    factory.student()
    student_role = db.get_role_by_name("student")
    super_role = db.get_role_by_name("superAdmin")

    with pytest.raises(BadRequestError):
        role_service.create_role(db, RoleCreate(name="janitor"), admin)
    with pytest.raises(ConflictError):
        role_service.create_role(db, RoleCreate(name="teacher"), admin)
    with pytest.raises(ForbiddenError):
        role_service.delete_role(db, super_role.id, admin)
    with pytest.raises(ConflictError):
        role_service.delete_role(db, student_role.id, admin)
    with pytest.raises(NotFoundError):
        role_service.delete_role(db, 999, admin)


def test_super_admin_recreates_its_role(db, factory, as_principal):
    boss = as_principal(factory.super_admin())
    teacher_role = db.get_role_by_name("teacher")

    role_service.delete_role(db, teacher_role.id, boss)
    recreated = role_service.create_role(db, RoleCreate(name="teacher"), boss)

    assert recreated.name == "teacher"
    with pytest.raises(ForbiddenError):
        role_service.create_role(db, RoleCreate(name="superAdmin"), as_principal(factory.admin()))


def test_archive_and_restore_a_teacher(db, factory, as_principal):
    admin = as_principal(factory.admin())
    teacher = factory.teacher(percent=20, phone="+998911234567")
    teacher_id = teacher.id

    snapshot = archive_service.archive_user(db, ArchiveCreate(user_id=teacher_id, remove_user=True), admin)

    assert snapshot.original_user_id == teacher_id
    assert db.get_user_by_id(teacher_id) is None
    assert [s.id for s in archive_service.list_archived_users(db, phone="1234567")] == [snapshot.id]

    restored = archive_service.restore_user(db, snapshot.id, admin)

    assert restored.phone == "+998911234567"
    assert restored.percent == 20
    assert restored.salary == 0
    with pytest.raises(NotFoundError):
        archive_service.get_archived_user(db, snapshot.id)


def test_restore_conflicts_with_a_live_user(db, factory, as_principal):
    admin = as_principal(factory.admin())
    student = factory.student()

    snapshot = archive_service.archive_user(db, ArchiveCreate(user_id=student.id), admin)

    with pytest.raises(ConflictError):
        archive_service.restore_user(db, snapshot.id, admin)
    assert archive_service.get_archived_user(db, snapshot.id).id == snapshot.id


def test_super_admins_are_protected(db, factory, as_principal):
    admin = as_principal(factory.admin())
    boss = factory.super_admin()

    with pytest.raises(ForbiddenError):
        archive_service.archive_user(db, ArchiveCreate(user_id=boss.id), admin)
    snapshot = archive_service.archive_user(db, ArchiveCreate(user_id=boss.id), as_principal(boss))
    with pytest.raises(ForbiddenError):
        archive_service.delete_archived_user(db, snapshot.id, admin)


def test_archive_from_fields(db, factory, as_principal):
    admin = as_principal(factory.admin())
    role = db.get_role_by_name("student")

    with pytest.raises(BadRequestError):
        archive_service.archive_user(db, ArchiveCreate(first_name="Old"), admin)
    snapshot = archive_service.archive_user(db, ArchiveCreate(
        first_name="Old", last_name="Timer", phone="+998930000000", role_id=role.id,
    ), admin)

    assert snapshot.original_user_id is None
    assert snapshot.role_id == role.id
