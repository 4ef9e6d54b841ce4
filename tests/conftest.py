import os

# Must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["R2_ENDPOINT"] = ""
os.environ["R2_ACCESS_KEY_ID"] = ""
os.environ["R2_SECRET_ACCESS_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core import security
from app.core.storage import r2_storage
from app.db.session import Base, SessionLocal, engine
from app.main import app
from app.modules.posts.comments.schemas.comment import CommentCreate
from app.modules.posts.comments.services.comment import create_comment
from app.modules.posts.models.post import PostType
from app.modules.posts.schemas.post import PostCreate
from app.modules.posts.services.post import create_post
from app.modules.user_management.services.user import create_user

# Cheap hashes keep the suite fast
security.pwd_context.update(bcrypt__rounds=4)

PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def local_storage(tmp_path, monkeypatch):
    monkeypatch.setattr(r2_storage, "client", None)
    monkeypatch.setattr(r2_storage, "local_root", str(tmp_path))
    return tmp_path


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


def auth_headers_for(user):
    token = security.create_access_token(user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return create_user(db, name="Asuka", email="asuka@example.com", password=PASSWORD)


@pytest.fixture
def other_user(db):
    return create_user(db, name="Shinji", email="shinji@example.com", password=PASSWORD)


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers_for(other_user)


@pytest.fixture
def post(db, user):
    post_in = PostCreate(
        description="Chainsaw Man part 2 is picking up",
        type=PostType.manga,
        current_chapters=150,
        tags=["shonen", "action"],
    )
    return create_post(db, post_in, user.id)


@pytest.fixture
def comment(db, post, other_user):
    comment_in = CommentCreate(content="Agreed, the last arc was great", post_id=post.id)
    return create_comment(db, comment_in, other_user.id)
