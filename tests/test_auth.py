import pytest
from django.core import signing

from users.models import CustomUser as User
from users.tokens import TOKEN_SALT, create_refresh_token

pytestmark = pytest.mark.django_db


def test_signup_creates_plain_user(anon_api):
    response = anon_api.post("/auth/signup", {
        "email": "  New.Person@Uniben.edu ",
        "full_name": "New Person",
        "password": "secret123",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new.person@uniben.edu"
    assert body["role"] == "user"
    assert body["student_profile"] is None
    assert "password" not in body
    assert User.objects.get(id=body["id"]).check_password("secret123")


def test_signup_rejects_missing_fields_and_short_password(anon_api):
    response = anon_api.post("/auth/signup", {"email": "a@b.com", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["detail"] == "email, full_name and password are required"

    response = anon_api.post("/auth/signup", {"email": "a@b.com", "full_name": "A", "password": "short"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Password must be at least 8 characters long"


def test_signup_rejects_duplicate_email_case_insensitively(anon_api, make_user):
    make_user("taken@uniben.edu")

    response = anon_api.post("/auth/signup", {
        "email": "TAKEN@uniben.edu",
        "full_name": "Someone",
        "password": "secret123",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_login_returns_token_pair(anon_api, make_user):
    make_user("login@uniben.edu", password="secret123")

    response = anon_api.post("/auth/login", {"email": "LOGIN@uniben.edu", "password": "secret123"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]


def test_login_failures(anon_api, make_user):
    make_user("inactive@uniben.edu", password="secret123", is_active=False)

    response = anon_api.post("/auth/login", {"email": "inactive@uniben.edu", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"

    response = anon_api.post("/auth/login", {"email": "inactive@uniben.edu", "password": "secret123"})
    assert response.status_code == 403
    assert response.json()["detail"] == "User is inactive"


def test_refresh_exchanges_refresh_token(anon_api, make_user):
    user = make_user("refresh@uniben.edu")

    response = anon_api.post("/auth/refresh", {"refresh_token": create_refresh_token(user.id)})

    assert response.status_code == 200
    assert response.json()["access_token"]


def test_refresh_rejects_access_token_and_garbage(anon_api, make_user, client_for):
    user = make_user("refresh@uniben.edu")
    access = client_for(user).token

    response = anon_api.post("/auth/refresh", {"refresh_token": access})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid refresh token"

    response = anon_api.post("/auth/refresh", {})
    assert response.status_code == 400
    assert response.json()["detail"] == "refresh_token is required"


def test_me_requires_bearer_header(anon_api, client_for):
    response = anon_api.get("/users/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"

    response = client_for(token="not-a-token").get("/users/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_me_rejects_refresh_token(make_user, client_for):
    user = make_user("me@uniben.edu")

    response = client_for(token=create_refresh_token(user.id)).get("/users/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token type"


def test_me_rejects_inactive_user(make_user, client_for):
    user = make_user("gone@uniben.edu", is_active=False)

    response = client_for(user).get("/users/me")

    assert response.status_code == 403
    assert response.json()["detail"] == "User inactive"


def test_me_rejects_token_signed_with_another_key(make_user, client_for):
    user = make_user("forged@uniben.edu")
    forged = signing.dumps({"sub": str(user.id), "type": "access"}, key="other-key", salt=TOKEN_SALT)

    response = client_for(token=forged).get("/users/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_me_includes_student_profile(student_api, student):
    response = student_api.get("/users/me")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == student.id
    assert body["student_profile"]["matric_no"] == "CSC/2024/001"
