# /educenter/db/base.py

# Central registry for all SQLAlchemy models. Importing them here makes sure
# `Base.metadata` knows every table when Alembic runs its auto-generation scan
# and when the tests call `create_all`.

from .base_class import Base

from .models.user_models import Role, User, ArchivedUser, group_students
from .models.catalog_models import Course, Group
from .models.attendance_models import Attendance, TeacherAttendance, Lesson
from .models.payment_models import Payment
from .models.application_models import Application
