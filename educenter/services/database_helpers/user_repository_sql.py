# /educenter/services/database_helpers/user_repository_sql.py

"""
SQLAlchemy queries for roles, users and archived user snapshots.

Repositories never commit. They add, flush and return ORM objects; the
calling service decides where the transaction ends through
`DatabaseService.transaction()`.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from educenter.db.models.user_models import ArchivedUser, Role, User


def _like(value: str) -> str:
    return f"%{value.strip()}%"


class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Role Methods ---

    def get_role_by_id(self, role_id: int) -> Optional[Role]:
        return self.db.query(Role).filter(Role.id == role_id).first()

    def get_role_by_name(self, name: str) -> Optional[Role]:
        return self.db.query(Role).filter(Role.name == name).first()

    def get_all_roles(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.id).all()

    def add_role(self, name: str) -> Role:
        role = Role(name=name)
        self.db.add(role)
        self.db.flush()
        return role

    def delete_role(self, role: Role) -> None:
        self.db.delete(role)
        self.db.flush()

    def count_users_with_role(self, role_id: int) -> int:
        return self.db.query(User).filter(User.role_id == role_id).count()

    # --- User Methods ---

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return (
            self.db.query(User)
            .options(selectinload(User.groups), selectinload(User.groups_as_teacher))
            .filter(User.id == user_id)
            .first()
        )

    def get_user_for_update(self, user_id: int) -> Optional[User]:
        """Fetches a user row with a row lock held until the transaction ends."""
        return self.db.query(User).filter(User.id == user_id).with_for_update().first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_user_by_phone(self, phone: str) -> Optional[User]:
        return self.db.query(User).filter(User.phone == phone).first()

    def get_user_with_role(self, user_id: int, role_name: str) -> Optional[User]:
        return (
            self.db.query(User)
            .join(Role, User.role_id == Role.id)
            .filter(User.id == user_id, Role.name == role_name)
            .first()
        )

    def get_users_with_role(self, user_ids: Iterable[int], role_name: str) -> List[User]:
        ids = list(user_ids)
        if not ids:
            return []
        return (
            self.db.query(User)
            .join(Role, User.role_id == Role.id)
            .filter(User.id.in_(ids), Role.name == role_name)
            .all()
        )

    def get_users(
        self,
        role_name: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> List[User]:
        """Lists users, optionally narrowed by role and case-insensitive name/phone fragments."""
        query = self.db.query(User).options(
            selectinload(User.groups), selectinload(User.groups_as_teacher)
        )
        if role_name:
            query = query.join(Role, User.role_id == Role.id).filter(Role.name == role_name)
        if user_id:
            query = query.filter(User.id == user_id)
        if first_name:
            query = query.filter(User.first_name.ilike(_like(first_name)))
        if last_name:
            query = query.filter(User.last_name.ilike(_like(last_name)))
        if phone:
            query = query.filter(User.phone.ilike(_like(phone)))
        if address:
            query = query.filter(User.address.ilike(_like(address)))
        return query.order_by(User.id).all()

    def get_users_excluding_roles(self, role_names: Iterable[str]) -> List[User]:
        return (
            self.db.query(User)
            .join(Role, User.role_id == Role.id)
            .options(selectinload(User.groups), selectinload(User.groups_as_teacher))
            .filter(Role.name.notin_(list(role_names)))
            .order_by(User.id)
            .all()
        )

    def get_users_with_salary(self) -> List[User]:
        return self.db.query(User).filter(User.salary.isnot(None)).order_by(User.id).all()

    def add_user(self, record: Dict) -> User:
        new_user = User(**record)
        self.db.add(new_user)
        self.db.flush()
        return new_user

    def update_user(self, user: User, data: Dict) -> User:
        for key, value in data.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    def delete_user(self, user: User) -> None:
        self.db.delete(user)
        self.db.flush()

    # --- Archive Methods ---

    def add_archived_user(self, record: Dict) -> ArchivedUser:
        snapshot = ArchivedUser(**record)
        self.db.add(snapshot)
        self.db.flush()
        return snapshot

    def get_archived_user(self, archive_id: int) -> Optional[ArchivedUser]:
        return self.db.query(ArchivedUser).filter(ArchivedUser.id == archive_id).first()

    def get_archived_users(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        role_id: Optional[int] = None,
    ) -> List[ArchivedUser]:
        query = self.db.query(ArchivedUser)
        if first_name:
            query = query.filter(ArchivedUser.first_name.ilike(_like(first_name)))
        if last_name:
            query = query.filter(ArchivedUser.last_name.ilike(_like(last_name)))
        if phone:
            query = query.filter(ArchivedUser.phone.ilike(_like(phone)))
        if role_id:
            query = query.filter(ArchivedUser.role_id == role_id)
        return query.order_by(ArchivedUser.archived_at.desc(), ArchivedUser.id.desc()).all()

    def delete_archived_user(self, snapshot: ArchivedUser) -> None:
        self.db.delete(snapshot)
        self.db.flush()


def name_filter(first_name_column, last_name_column, fragment: str):
    """OR-filter matching a fragment against either name column."""
    pattern = _like(fragment)
    return or_(first_name_column.ilike(pattern), last_name_column.ilike(pattern))
