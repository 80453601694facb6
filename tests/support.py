"""Shared helpers: in-memory database, users and an API client wired to them."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from simple_notes.core.database import get_db, init_db
from simple_notes.core.identity import Identity
from simple_notes.core.tokens import encode_access_token
from simple_notes.main import app
from simple_notes.models import Note, NoteVisibility, User, UserRole

PASSWORD = "correct-horse"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(db: Session, username: str, role: UserRole = UserRole.USER) -> User:
    """Insert a user directly; skips bcrypt since most tests never log in."""
    user = User(username=username, password_hash="!", role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def identity_for(user: User) -> Identity:
    return Identity(user_id=user.id, username=user.username, role=user.role)


def add_note(
    db: Session,
    author: User,
    title: str = "A note",
    visibility: NoteVisibility = NoteVisibility.PUBLIC,
    published: bool = True,
) -> Note:
    note = Note(
        title=title,
        summary="summary",
        content="content",
        author_id=author.id,
        visibility=visibility,
        published=published,
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


class ApiTestCase:
    """
    Mixin for unittest.TestCase: a TestClient whose get_db uses an in-memory store.

    The client is not entered as a context manager, so the lifespan (which
    creates tables in the configured database) never runs.
    """

    def setUp(self) -> None:
        self.Session = make_session_factory()
        self.db = self.Session()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)
        self.secret = app.state.identity_resolver.secret

    def tearDown(self) -> None:
        app.dependency_overrides.pop(get_db, None)
        self.db.close()

    def auth_headers(self, user: User) -> dict[str, str]:
        token, _ = encode_access_token(user.id, user.username, user.role, self.secret)
        return {"Authorization": f"Bearer {token}"}
