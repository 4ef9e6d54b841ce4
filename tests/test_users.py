API = "/api/v1/users"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_profile_requires_authentication(client):
    assert client.get(f"{API}/profile").status_code == 401


def test_read_profile(client, user, auth_headers):
    response = client.get(f"{API}/profile", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["id"] == user.id
    assert response.json()["email"] == user.email


def test_update_profile_name(client, auth_headers):
    response = client.patch(f"{API}/profile", json={"name": "  Asuka Langley  "}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Asuka Langley"


def test_update_profile_rejects_long_name(client, auth_headers):
    response = client.patch(f"{API}/profile", json={"name": "x" * 101}, headers=auth_headers)
    assert response.status_code == 422


def test_profile_photo_lifecycle(client, user, auth_headers, other_headers):
    assert client.get(f"{API}/profile/photo", headers=auth_headers).status_code == 404

    upload = client.post(
        f"{API}/profile/photo",
        files={"photo": ("me.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert upload.status_code == 200
    assert upload.json()["has_profile_photo"] is True

    own = client.get(f"{API}/profile/photo", headers=auth_headers)
    assert own.status_code == 200
    assert own.content == PNG_BYTES
    assert own.headers["content-type"] == "image/png"

    seen_by_other = client.get(f"{API}/{user.id}/photo", headers=other_headers)
    assert seen_by_other.content == PNG_BYTES

    removed = client.delete(f"{API}/profile/photo", headers=auth_headers)
    assert removed.status_code == 200
    assert removed.json()["has_profile_photo"] is False
    assert client.get(f"{API}/profile/photo", headers=auth_headers).status_code == 404


def test_profile_photo_rejects_unsupported_type(client, auth_headers):
    response = client.post(
        f"{API}/profile/photo",
        files={"photo": ("anim.gif", b"GIF89a", "image/gif")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_read_other_user(client, other_user, auth_headers):
    response = client.get(f"{API}/{other_user.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["name"] == other_user.name
    assert "email" not in response.json()


def test_read_unknown_user(client, auth_headers):
    assert client.get(f"{API}/missing", headers=auth_headers).status_code == 404
