"""
/auth endpoints: login, logout, profile, capabilities, dev role switching
"""

from academy.errors import AuthenticationError, TransportError

from conftest import STUDENT_PAYLOAD, TEACHER_PAYLOAD


def test_login_returns_session(client, identity_client):
    resp = client.post("/auth/login?next=/courses", json={"email": "ada@academy.org", "password": "secret"})

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "authenticated"
    assert data["user"]["name"] == "Ada Lovelace"
    assert data["next"] == "/courses"
    identity_client.login.assert_called_once_with("ada@academy.org", "secret", None)


def test_login_validates_input(client, identity_client):
    resp = client.post("/auth/login", json={"email": "not-an-email", "password": "x"})
    assert resp.status_code == 400
    identity_client.login.assert_not_called()


def test_login_wrong_password(client, identity_client):
    identity_client.login.side_effect = AuthenticationError()
    resp = client.post("/auth/login", json={"email": "ada@academy.org", "password": "bad"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid email or password."}


def test_login_asks_for_verification_code(client, identity_client):
    identity_client.login.side_effect = AuthenticationError(
        "Enter the code we emailed you.", status_code=403, reason=AuthenticationError.VERIFICATION_REQUIRED)
    resp = client.post("/auth/login", json={"email": "ada@academy.org", "password": "secret"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Enter the code we emailed you.", "reason": "verification_required"}


def test_login_network_failure(client, identity_client):
    identity_client.login.side_effect = TransportError()
    resp = client.post("/auth/login", json={"email": "ada@academy.org", "password": "secret"})
    assert resp.status_code == 502
    assert "try again" in resp.get_json()["error"]


def test_me_and_logout(client, log_in):
    log_in(TEACHER_PAYLOAD)
    me = client.get("/auth/me").get_json()
    assert me["status"] == "authenticated"
    assert me["user"]["role"] == "teacher"

    assert client.post("/auth/logout").status_code == 200
    me = client.get("/auth/me").get_json()
    assert me == {"status": "unauthenticated", "user": None, "isLoading": False, "hasCompletedOnboarding": False}


def test_capabilities(client, log_in):
    assert client.get("/auth/capabilities").get_json() == {"role": None, "capabilities": []}
    log_in(TEACHER_PAYLOAD)
    caps = client.get("/auth/capabilities").get_json()
    assert caps["role"] == "teacher"
    assert "add_course" in caps["capabilities"]
    assert "admin_panel" not in caps["capabilities"]


def test_student_record(client, identity_client, log_in):
    log_in(STUDENT_PAYLOAD)
    identity_client.fetch_student.return_value = {"user_id": 8, "approved": False}

    data = client.get("/auth/student").get_json()
    assert data == {
        "student": {"id": "8", "status": "PENDING", "questions_and_answers": ""},
        "status": "PENDING",
    }


def test_student_record_for_teacher_is_empty(client, identity_client, log_in):
    log_in(TEACHER_PAYLOAD)
    assert client.get("/auth/student").get_json() == {"student": None, "status": None}


def test_onboarding(client, log_in):
    log_in(STUDENT_PAYLOAD)
    data = client.post("/auth/onboarding", json={"interests": ["python"]}).get_json()
    assert data["hasCompletedOnboarding"] is True


def test_role_switch_unavailable_in_production(client):
    assert client.post("/auth/dev/role", json={"role": "admin"}).status_code == 404


def test_role_switch_in_dev_mode(dev_app):
    client = dev_app.test_client()
    data = client.post("/auth/dev/role", json={"role": "teacher"}).get_json()
    assert data["user"]["id"] == "teacher-1"

    assert client.post("/auth/dev/role", json={"role": "wizard"}).status_code == 400
    assert client.get("/teacher/videos").status_code == 200
