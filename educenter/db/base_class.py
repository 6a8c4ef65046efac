# /educenter/db/base_class.py

from sqlalchemy.orm import as_declarative, declared_attr


@as_declarative()
class Base:
    """
    Declarative base for every ORM model.

    The table name defaults to the lowercased class name plus "s"
    (`Course` -> `courses`). Models whose plural is irregular set
    `__tablename__` explicitly.
    """
    id: int
    __name__: str

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"
