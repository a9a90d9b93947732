from datetime import date

from taskboard.models import User
from taskboard.schemas.task import AdminTaskCreate, IndividualTaskCreate
from taskboard.security import create_access_token

PASSWORD = "secret1"


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


def individual_payload(**overrides) -> IndividualTaskCreate:
    fields = dict(
        title="Write report",
        description="Quarterly numbers",
        priority="high",
        due_date=date(2030, 1, 15),
        timeline="2 weeks",
        notes="Use last quarter's template",
    )
    fields.update(overrides)
    return IndividualTaskCreate(**fields)


def admin_payload(assigned_users, **overrides) -> AdminTaskCreate:
    fields = dict(
        title="Rotate certificates",
        description="All edge nodes",
        priority="medium",
        due_date=date(2030, 2, 1),
        timeline="1 week",
        notes="Coordinate with on-call",
        group_name="Ops",
        assigned_users=list(assigned_users),
    )
    fields.update(overrides)
    return AdminTaskCreate(**fields)
