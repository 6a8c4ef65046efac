# /educenter/services/database_helpers/application_repository_sql.py

from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from educenter.db.models.application_models import Application


class ApplicationRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_application(self, application_id: int) -> Optional[Application]:
        return (
            self.db.query(Application)
            .options(selectinload(Application.group))
            .filter(Application.id == application_id)
            .first()
        )

    def get_applications(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> List[Application]:
        query = self.db.query(Application).options(selectinload(Application.group))
        if first_name:
            query = query.filter(Application.first_name.ilike(f"%{first_name.strip()}%"))
        if last_name:
            query = query.filter(Application.last_name.ilike(f"%{last_name.strip()}%"))
        if phone:
            query = query.filter(Application.phone.ilike(f"%{phone.strip()}%"))
        return query.order_by(Application.created_at.desc(), Application.id.desc()).all()

    def add_application(self, record: Dict) -> Application:
        application = Application(**record)
        self.db.add(application)
        self.db.flush()
        return application

    def update_application(self, application: Application, data: Dict) -> Application:
        for key, value in data.items():
            setattr(application, key, value)
        self.db.flush()
        return application

    def delete_application(self, application: Application) -> None:
        self.db.delete(application)
        self.db.flush()
