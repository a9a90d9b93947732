from datetime import timedelta

from sqlmodel import select

from taskboard.models import Notification, Task, UserTaskRef
from taskboard.security import create_access_token

from .helpers import PASSWORD, auth_headers

TASK_FIELDS = {
    "title": "Rotate certificates",
    "description": "All edge nodes",
    "priority": "high",
    "dueDate": "2030-01-15",
    "timeline": "1 week",
    "notes": "Coordinate with on-call",
}


def _admin_task(client, creator, members, **overrides):
    body = {**TASK_FIELDS, "groupName": "Ops", "assignedUsers": [m.id for m in members], **overrides}
    return client.post("/api/tasks/admin", json=body, headers=auth_headers(creator))


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

def test_signup_then_login(client):
    response = client.post(
        "/api/users/signup",
        json={"name": "Dana", "email": "dana@example.com", "password": "hunter22"},
    )
    assert response.status_code == 201
    signed_up = response.json()
    assert set(signed_up) == {"userId", "email", "token"}

    response = client.post("/api/users/login", json={"email": "dana@example.com", "password": "hunter22"})
    assert response.status_code == 200
    assert response.json()["userId"] == signed_up["userId"]
    assert "token" in response.cookies

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {response.json()['token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "dana@example.com"
    assert me.json()["tasks"] == []


def test_signup_validation(client):
    response = client.post("/api/users/signup", json={"name": "", "email": "nope", "password": "123"})
    assert response.status_code == 422


def test_login_with_wrong_password(client, alice):
    response = client.post("/api/users/login", json={"email": alice.email, "password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"detail": "Credentials seem to be wrong."}


def test_protected_route_requires_token(client):
    response = client.get("/api/tasks")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_protected_route_rejects_bad_and_expired_tokens(client, alice):
    expired = create_access_token(alice.id, alice.email, expires_delta=timedelta(minutes=-1))
    for token in ("not-a-jwt", expired):
        response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


def test_session_cookie_authenticates(client, alice):
    client.post("/api/users/login", json={"email": alice.email, "password": PASSWORD})
    assert client.get("/api/tasks").status_code == 200

    client.post("/api/users/logout")
    assert client.get("/api/tasks").status_code == 401


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def test_create_individual_task(client, database, alice):
    response = client.post("/api/tasks/member", json=TASK_FIELDS, headers=auth_headers(alice))

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "individual"
    assert body["status"] == "todo"
    assert body["creatorId"] == alice.id
    assert body["dueDate"] == "2030-01-15"
    with database.session() as session:
        refs = session.exec(select(UserTaskRef.task_id).where(UserTaskRef.user_id == alice.id)).all()
    assert refs == [body["id"]]


def test_create_individual_task_missing_field(client, alice):
    body = {**TASK_FIELDS, "notes": ""}
    response = client.post("/api/tasks/member", json=body, headers=auth_headers(alice))
    assert response.status_code == 422


def test_create_task_by_role_discriminator(client, alice, bob):
    response = client.post(
        "/api/tasks",
        json={**TASK_FIELDS, "role": "admin", "groupName": "Ops", "assignedUsers": [bob.id]},
        headers=auth_headers(alice),
    )

    assert response.status_code == 201
    assert response.json()["role"] == "admin"
    assert response.json()["assignedUsers"] == [bob.id]


def test_create_admin_task_with_no_assignees(client, database, alice):
    response = _admin_task(client, alice, [])

    assert response.status_code == 422
    assert response.json() == {"detail": "At least one user must be assigned to the task"}
    with database.session() as session:
        assert session.exec(select(Task)).all() == []


def test_create_admin_task_requires_group_name(client, alice, bob):
    response = _admin_task(client, alice, [bob], groupName="")
    assert response.status_code == 422


def test_ops_scenario(client, database, alice, bob, carol):
    created = _admin_task(client, alice, [bob, carol])
    assert created.status_code == 201
    task_id = created.json()["id"]

    response = client.patch(f"/api/tasks/{task_id}/status", json={"status": "done"}, headers=auth_headers(bob))
    assert response.status_code == 200
    assert response.json()["status"] == "done"

    with database.session() as session:
        assert session.get(Task, task_id).status == "done"
        notifications = session.exec(select(Notification)).all()
    assert len(notifications) == 1
    assert notifications[0].admin_id == alice.id
    assert notifications[0].member_id == bob.id
    assert notifications[0].task_id == task_id
    assert notifications[0].is_read is False

    listed = client.get("/api/notifications", headers=auth_headers(alice)).json()
    assert len(listed) == 1
    assert listed[0]["taskTitle"] == "Rotate certificates"
    assert listed[0]["memberName"] == "Bob"
    assert listed[0]["isRead"] is False
    assert client.get("/api/notifications", headers=auth_headers(bob)).json() == []


def test_list_tasks_for_caller(client, alice, bob):
    task_id = _admin_task(client, alice, [bob]).json()["id"]

    response = client.get("/api/tasks", headers=auth_headers(bob))

    assert response.status_code == 200
    [item] = response.json()
    assert item["id"] == task_id
    assert item["userRole"] == "assigned"
    assert item["creatorName"] == "Alice"


def test_list_tasks_by_user_path_is_scoped(client, alice, bob):
    assert client.get(f"/api/tasks/user/{alice.id}", headers=auth_headers(alice)).status_code == 200
    assert client.get(f"/api/tasks/user/{alice.id}", headers=auth_headers(bob)).status_code == 403


def test_get_task_by_id(client, alice, bob, carol):
    task_id = _admin_task(client, alice, [bob]).json()["id"]

    assert client.get(f"/api/tasks/{task_id}", headers=auth_headers(bob)).status_code == 200
    assert client.get(f"/api/tasks/{task_id}", headers=auth_headers(carol)).status_code == 403
    assert client.get("/api/tasks/missing", headers=auth_headers(alice)).status_code == 404


def test_update_task_fields(client, alice):
    task_id = client.post("/api/tasks/member", json=TASK_FIELDS, headers=auth_headers(alice)).json()["id"]

    response = client.patch(
        f"/api/tasks/{task_id}",
        json={"timeline": "3 days", "title": "ignored"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "task": {"id": task_id, "dueDate": "2030-01-15", "timeline": "3 days", "notes": TASK_FIELDS["notes"]},
    }

    empty = client.patch(f"/api/tasks/{task_id}", json={"title": "only"}, headers=auth_headers(alice))
    assert empty.status_code == 422


def test_invalid_status_value(client, alice):
    task_id = client.post("/api/tasks/member", json=TASK_FIELDS, headers=auth_headers(alice)).json()["id"]

    response = client.patch(f"/api/tasks/{task_id}/status", json={"status": "archived"}, headers=auth_headers(alice))

    assert response.status_code == 422


def test_status_update_by_outsider(client, alice, bob, carol):
    task_id = _admin_task(client, alice, [bob]).json()["id"]

    response = client.patch(f"/api/tasks/{task_id}/status", json={"status": "done"}, headers=auth_headers(carol))

    assert response.status_code == 403
    assert response.json() == {"detail": "Not authorized to update this task."}


def test_delete_task(client, database, alice, bob):
    task_id = _admin_task(client, alice, [bob]).json()["id"]

    forbidden = client.delete(f"/api/tasks/{task_id}", headers=auth_headers(bob))
    assert forbidden.status_code == 403
    with database.session() as session:
        assert session.get(Task, task_id) is not None

    response = client.delete(f"/api/tasks/{task_id}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted."}
    with database.session() as session:
        assert session.get(Task, task_id) is None
        assert session.exec(select(UserTaskRef)).all() == []

    assert client.delete(f"/api/tasks/{task_id}", headers=auth_headers(alice)).status_code == 404


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

def test_notification_read_and_delete(client, alice, bob):
    task_id = _admin_task(client, alice, [bob]).json()["id"]
    client.patch(f"/api/tasks/{task_id}/status", json={"status": "done"}, headers=auth_headers(bob))
    [notification] = client.get("/api/notifications", headers=auth_headers(alice)).json()
    url = f"/api/notifications/{notification['id']}"

    assert client.patch(url, headers=auth_headers(bob)).status_code == 403
    for _ in range(2):
        response = client.patch(url, headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json() == {"message": "Notification marked as read."}
    assert client.get("/api/notifications", headers=auth_headers(alice)).json()[0]["isRead"] is True

    assert client.delete(url, headers=auth_headers(bob)).status_code == 403
    assert client.delete(url, headers=auth_headers(alice)).status_code == 200
    assert client.get("/api/notifications", headers=auth_headers(alice)).json() == []
    assert client.delete(url, headers=auth_headers(alice)).status_code == 404


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def test_list_users_and_profile(client, alice, bob):
    _admin_task(client, alice, [bob])

    users = client.get("/api/users").json()
    assert {u["email"] for u in users} == {alice.email, bob.email}
    assert all("hashedPassword" not in u and "hashed_password" not in u for u in users)

    profile = client.get(f"/api/users/{bob.id}/profile").json()
    assert profile == {
        "name": "Bob",
        "email": bob.email,
        "createdTasksCount": 0,
        "assignedTasksCount": 1,
        "totalTasksCount": 1,
    }
    assert client.get("/api/users/missing/profile").status_code == 404


def test_update_profile(client, alice, bob):
    body = {"name": "Alice S", "email": alice.email, "oldPassword": PASSWORD, "newPassword": "brand-new"}

    assert client.patch(f"/api/users/{alice.id}/profile", json=body, headers=auth_headers(bob)).status_code == 403

    response = client.patch(f"/api/users/{alice.id}/profile", json=body, headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["name"] == "Alice S"
    assert "token" in response.json()

    login = client.post("/api/users/login", json={"email": alice.email, "password": "brand-new"})
    assert login.status_code == 200
