# /tests/test_api.py

from jose import jwt


def test_health_check(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "running" in response.json()["status"]


def test_login_issues_a_usable_token(client, factory):
    factory.admin(username="boss", password="secret1", first_name="Malika")

    response = client.post("/auth/login", json={"username": "boss", "password": "secret1"})

    assert response.status_code == 200
    body = response.json()
    me = client.get("/users/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["firstName"] == "Malika"
    assert me.json()["role"]["name"] == "admin"


def test_bad_password_is_unauthorized(client, factory):
    factory.admin(username="boss", password="secret1")

    response = client.post("/auth/login", json={"username": "boss", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid username or password"}


def test_missing_or_forged_token(client):
    assert client.get("/users").status_code == 401
    forged = jwt.encode({"id": 1, "username": "x", "role": "admin"}, "another-secret", algorithm="HS256")
    assert client.get("/users", headers={"Authorization": f"Bearer {forged}"}).status_code == 401


def test_role_gate(client, factory, auth):
    student = factory.student()

    assert client.get("/users", headers=auth(student)).status_code == 403
    assert client.get("/users/me", headers=auth(student)).status_code == 200


def test_group_creation_over_http(client, factory, auth):
    admin = factory.admin()
    teacher = factory.teacher(percent=10)
    students = [factory.student(), factory.student()]
    course = factory.course()

    response = client.post("/groups", headers=auth(admin), json={
        "name": "Python 101",
        "courseId": course.id,
        "teacherId": teacher.id,
        "price": 100000,
        "userIds": [s.id for s in students],
        "daysOfWeek": ["Monday", "Wednesday"],
        "startTime": "14:00",
        "endTime": "16:00",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Python 101"
    assert body["teacherSalary"] == 20000
    assert len(body["students"]) == 2

    duplicate = client.post("/groups", headers=auth(admin), json={
        "name": "Python 101", "courseId": course.id, "price": 1,
    })
    assert duplicate.status_code == 409


def test_errors_are_translated(client, factory, auth):
    admin = factory.admin()

    missing = client.get("/users/999", headers=auth(admin))
    invalid = client.post("/payments", headers=auth(admin), json={"userId": 1})

    assert missing.status_code == 404
    assert missing.json() == {"detail": "User not found"}
    assert invalid.status_code == 400
    assert "groupId" in invalid.json()["detail"] or "group_id" in invalid.json()["detail"]


def test_public_application_form(client):
    response = client.post("/applications", json={
        "firstName": "Lola", "lastName": "Karimova", "phone": "+998901112233",
    })

    assert response.status_code == 201
    assert response.json()["status"] is False
