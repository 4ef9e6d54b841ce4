from app.core.config import settings
from app.modules.posts.models.post import Post, PostType
from app.modules.posts.schemas.post import PostCreate
from app.modules.posts.services.post import create_post

API = "/api/v1/posts"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x01" * 128
WEBP_BYTES = b"RIFF\x00\x00\x00\x00WEBPVP8 " + b"\x02" * 64


def make_post(db, author, description="A post", type=PostType.manga, tags=None):
    return create_post(db, PostCreate(description=description, type=type, tags=tags or []), author.id)


def test_create_post_without_image(client, user, auth_headers):
    response = client.post(
        API,
        data={"description": "Solo Leveling reread", "type": "manhwa", "current_chapters": "179", "tags": ["action", "system"]},
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "manhwa"
    assert body["current_chapters"] == 179
    assert body["tags"] == ["action", "system"]
    assert body["has_image"] is False
    assert body["likes_count"] == 0
    assert body["author"] == {"id": user.id, "name": user.name}


def test_create_post_with_image_and_fetch_it(client, auth_headers):
    response = client.post(
        API,
        data={"description": "Cover art", "type": "anime"},
        files={"image": ("cover.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 201
    post_id = response.json()["id"]
    assert response.json()["has_image"] is True

    image = client.get(f"{API}/{post_id}/image")
    assert image.status_code == 200
    assert image.content == PNG_BYTES
    assert image.headers["content-type"] == "image/png"


def test_create_post_rejects_unsupported_image(client, auth_headers):
    response = client.post(
        API,
        data={"description": "Gif", "type": "anime"},
        files={"image": ("loop.gif", b"GIF89a", "image/gif")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_create_post_rejects_oversized_image(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 16)
    response = client.post(
        API,
        data={"description": "Too big", "type": "anime"},
        files={"image": ("big.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_create_post_validation(client, auth_headers):
    too_many_tags = [f"tag{i}" for i in range(11)]
    response = client.post(
        API,
        data={"description": "Tags", "type": "manga", "tags": too_many_tags},
        headers=auth_headers,
    )
    assert response.status_code == 422

    response = client.post(
        API,
        data={"description": "Long tag", "type": "manga", "tags": ["x" * 51]},
        headers=auth_headers,
    )
    assert response.status_code == 422

    response = client.post(API, data={"description": "x" * 2001, "type": "manga"}, headers=auth_headers)
    assert response.status_code == 422

    response = client.post(API, data={"description": "Bad type", "type": "novel"}, headers=auth_headers)
    assert response.status_code == 422

    response = client.post(
        API, data={"description": "Negative", "type": "manga", "current_chapters": "-1"}, headers=auth_headers
    )
    assert response.status_code == 422


def test_create_post_requires_authentication(client):
    response = client.post(API, data={"description": "Anon", "type": "manga"})
    assert response.status_code == 401


def test_list_posts_paginates(client, db, user):
    for i in range(5):
        make_post(db, user, description=f"Post {i}")

    response = client.get(API, params={"page": 2, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 5
    assert body["page"] == 2
    assert body["limit"] == 2
    assert body["total_pages"] == 3
    assert body["has_next"] is True
    assert body["has_prev"] is True
    assert len(body["data"]) == 2


def test_list_posts_filters(client, db, user, other_user):
    make_post(db, user, description="Berserk golden age", type=PostType.manga, tags=["dark", "fantasy"])
    make_post(db, user, description="Frieren episode 28", type=PostType.anime, tags=["fantasy"])
    make_post(db, other_user, description="Tower of God", type=PostType.manhwa, tags=["action"])

    by_type = client.get(API, params={"type": "anime"}).json()
    assert [p["description"] for p in by_type["data"]] == ["Frieren episode 28"]

    by_tags = client.get(API, params=[("tags", "dark"), ("tags", "action")]).json()
    assert {p["description"] for p in by_tags["data"]} == {"Berserk golden age", "Tower of God"}

    by_search = client.get(API, params={"search": "GOLDEN"}).json()
    assert [p["description"] for p in by_search["data"]] == ["Berserk golden age"]

    by_author = client.get(API, params={"author_id": other_user.id}).json()
    assert by_author["total"] == 1


def test_search_treats_wildcards_literally(client, db, user):
    make_post(db, user, description="100% worth it")
    make_post(db, user, description="1000 chapters in")
    make_post(db, user, description="snake_case fan")
    make_post(db, user, description="snakeXcase fan")

    percent = client.get(API, params={"search": "100%"}).json()
    assert [p["description"] for p in percent["data"]] == ["100% worth it"]

    underscore = client.get(API, params={"search": "snake_case"}).json()
    assert [p["description"] for p in underscore["data"]] == ["snake_case fan"]


def test_list_posts_sorted_by_likes(client, db, user):
    quiet = make_post(db, user, description="Quiet")
    popular = make_post(db, user, description="Popular")
    popular.likes_count = 7
    quiet.likes_count = 2
    db.commit()

    desc = client.get(API, params={"sort_by": "likes_count", "sort_order": "desc"}).json()
    assert [p["description"] for p in desc["data"]] == ["Popular", "Quiet"]

    asc = client.get(API, params={"sort_by": "likes_count", "sort_order": "asc"}).json()
    assert [p["description"] for p in asc["data"]] == ["Quiet", "Popular"]


def test_my_posts(client, db, user, other_user, auth_headers):
    make_post(db, user, description="Mine")
    make_post(db, other_user, description="Theirs")

    response = client.get(f"{API}/my-posts", headers=auth_headers)

    assert response.status_code == 200
    assert [p["description"] for p in response.json()["data"]] == ["Mine"]


def test_read_post(client, post):
    response = client.get(f"{API}/{post.id}")

    assert response.status_code == 200
    assert response.json()["tags"] == ["shonen", "action"]


def test_read_missing_post(client):
    assert client.get(f"{API}/missing").status_code == 404
    assert client.get(f"{API}/missing/image").status_code == 404


def test_image_of_post_without_image(client, post):
    assert client.get(f"{API}/{post.id}/image").status_code == 404


def test_update_post_by_author(client, post, auth_headers):
    response = client.patch(
        f"{API}/{post.id}",
        json={"current_chapters": 151, "tags": ["action", "gore"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["current_chapters"] == 151
    assert response.json()["tags"] == ["action", "gore"]
    assert response.json()["description"] == post.description


def test_update_post_rejects_long_tag(client, post, auth_headers):
    response = client.patch(f"{API}/{post.id}", json={"tags": ["x" * 51]}, headers=auth_headers)
    assert response.status_code == 422

    response = client.patch(f"{API}/{post.id}", json={"tags": ["x" * 50]}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["tags"] == ["x" * 50]


def test_update_post_by_someone_else_is_forbidden(client, post, other_headers):
    response = client.patch(f"{API}/{post.id}", json={"description": "hijacked"}, headers=other_headers)
    assert response.status_code == 403


def test_replace_and_remove_post_image(client, post, auth_headers, other_headers):
    forbidden = client.patch(
        f"{API}/{post.id}/image",
        files={"image": ("a.webp", WEBP_BYTES, "image/webp")},
        headers=other_headers,
    )
    assert forbidden.status_code == 403

    replaced = client.patch(
        f"{API}/{post.id}/image",
        files={"image": ("a.webp", WEBP_BYTES, "image/webp")},
        headers=auth_headers,
    )
    assert replaced.status_code == 200
    assert replaced.json()["has_image"] is True
    assert client.get(f"{API}/{post.id}/image").content == WEBP_BYTES

    removed = client.delete(f"{API}/{post.id}/image", headers=auth_headers)
    assert removed.status_code == 200
    assert removed.json()["has_image"] is False
    assert client.get(f"{API}/{post.id}/image").status_code == 404


def test_delete_post_cascades(client, db, post, comment, auth_headers, other_headers):
    client.post(
        "/api/v1/reactions",
        json={"type": "like", "target": "comment", "comment_id": comment.id},
        headers=auth_headers,
    )

    forbidden = client.delete(f"{API}/{post.id}", headers=other_headers)
    assert forbidden.status_code == 403

    response = client.delete(f"{API}/{post.id}", headers=auth_headers)
    assert response.status_code == 200

    assert client.get(f"{API}/{post.id}").status_code == 404
    assert client.get(f"/api/v1/comments/{comment.id}").status_code == 404
    db.expire_all()
    assert db.query(Post).count() == 0
