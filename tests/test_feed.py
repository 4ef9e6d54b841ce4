from app.core.config import settings

API = "/api/v1/feed"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x03" * 32


def test_empty_feed(client):
    response = client.get(API)

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert response.json()["pagination"]["total"] == 0


def test_feed_item_shape(client, user, other_user, post, comment, auth_headers, other_headers):
    client.post(
        "/api/v1/reactions",
        json={"type": "like", "target": "post", "post_id": post.id},
        headers=other_headers,
    )
    client.post(
        "/api/v1/comments",
        json={"content": "a reply", "post_id": post.id, "parent_id": comment.id},
        headers=auth_headers,
    )

    response = client.get(API)

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 1
    item = items[0]
    assert item["id"] == post.id
    assert item["author"] == {"id": user.id, "name": user.name}
    assert item["has_image"] is False
    assert item["image_url"] is None
    assert item["likes_count"] == 1
    assert item["comments_count"] == 2
    assert [r["type"] for r in item["reactions"]] == ["like"]
    assert item["reactions"][0]["user"] == {"id": other_user.id, "name": other_user.name}
    # Only top-level comments are embedded
    assert [c["id"] for c in item["comments"]] == [comment.id]
    assert item["comments"][0]["user"]["id"] == other_user.id
    assert item["user_reaction"] is None


def test_feed_shows_callers_reaction(client, post, auth_headers):
    client.post(
        "/api/v1/reactions",
        json={"type": "dislike", "target": "post", "post_id": post.id},
        headers=auth_headers,
    )

    anonymous = client.get(API).json()["items"][0]
    signed_in = client.get(API, headers=auth_headers).json()["items"][0]

    assert anonymous["user_reaction"] is None
    assert signed_in["user_reaction"] == "dislike"


def test_feed_image_url(client, auth_headers):
    created = client.post(
        "/api/v1/posts",
        data={"description": "With cover", "type": "manga"},
        files={"image": ("cover.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    ).json()

    item = client.get(API).json()["items"][0]
    assert item["image_url"] == f"{settings.BASE_URL}{settings.API_V1_STR}/posts/{created['id']}/image"


def test_feed_pagination(client, auth_headers):
    for i in range(3):
        client.post("/api/v1/posts", data={"description": f"Post {i}", "type": "anime"}, headers=auth_headers)

    body = client.get(API, params={"page": 1, "limit": 2}).json()

    assert len(body["items"]) == 2
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }
