"""Authenticated profile endpoints."""

import uuid

from jose import jwt

from app.infrastructure.orm import UserModel

from tests.factories import auth_headers, find, make_user

API = "/api/user/profile"


def test_profile_requires_token(client):
    response = client.get(API)
    assert response.status_code == 401
    assert response.json()["detail"] == "Authorization token required"


def test_profile_rejects_token_signed_elsewhere(client):
    user_id = make_user()
    forged = jwt.encode({"userId": str(user_id), "email": "user@example.com"}, "not-our-key", algorithm="HS256")

    response = client.get(API, headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_profile_for_deleted_user_is_not_found(client):
    response = client.get(API, headers=auth_headers(uuid.uuid4()))
    assert response.status_code == 404


def test_get_profile(client):
    user_id = make_user(name="Ada")

    response = client.get(API, headers=auth_headers(user_id))

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == str(user_id)
    assert user["email"] == "user@example.com"
    assert user["name"] == "Ada"
    assert user["isVerified"] is True
    assert "createdAt" in user and "updatedAt" in user


def test_update_profile_name(client):
    user_id = make_user(name="Ada")

    response = client.put(API, json={"name": "  Grace  "}, headers=auth_headers(user_id))

    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Grace"
    assert find(UserModel, id=user_id).name == "Grace"


def test_update_profile_requires_name(client):
    user_id = make_user(name="Ada")

    response = client.put(API, json={"name": "   "}, headers=auth_headers(user_id))

    assert response.status_code == 400
    assert response.json()["detail"] == "Name is required"
    assert find(UserModel, id=user_id).name == "Ada"
