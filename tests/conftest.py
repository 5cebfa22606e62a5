# tests/conftest.py
from __future__ import annotations

import hashlib
import re
from collections.abc import Callable, Generator, Iterator

import pytest
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from stakemod.core.settings import Settings
from stakemod.db.session import Base, create_db_engine, create_session_factory
from stakemod.models import Classification
from stakemod.services import CallContext, ModerationService

TEST_DB_URL = "sqlite://"

OWNER = "owner"
PLATFORM = "platform-p"
MODERATOR = "moderator-m"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_db_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = create_session_factory(engine, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide settings with the default staking rules and a known owner."""
    return Settings(owner_identity=OWNER)


@pytest.fixture()
def service(db_session: Session, test_settings: Settings) -> ModerationService:
    return ModerationService(db_session, test_settings)


@pytest.fixture()
def ctx() -> Callable[..., CallContext]:
    """Return a factory for call contexts."""

    def factory(caller: str = MODERATOR, height: int = 0) -> CallContext:
        return CallContext(caller=caller, block_height=height)

    return factory


@pytest.fixture()
def digest() -> bytes:
    """Return a 32-byte content digest."""
    return hashlib.sha256(b"Test post content").digest()


@pytest.fixture()
def registered_platform(service: ModerationService, ctx: Callable[..., CallContext]) -> str:
    """Register the default platform and return its identity."""
    service.register_platform(ctx(PLATFORM), "Platform P")
    return PLATFORM


@pytest.fixture()
def pending_request(
    service: ModerationService,
    ctx: Callable[..., CallContext],
    registered_platform: str,
    digest: bytes,
) -> int:
    """Submit a request at block height 10 and return its id."""
    return service.submit_moderation_request(ctx(registered_platform, 10), digest)


@pytest.fixture()
def reviewed_request(
    service: ModerationService,
    ctx: Callable[..., CallContext],
    pending_request: int,
) -> int:
    """Cast one spam vote at block height 11 so the request is under review."""
    service.vote_on_content(ctx(MODERATOR, 11), pending_request, Classification.SPAM, 1000, "us")
    return pending_request


@pytest.fixture()
def approved_request(
    service: ModerationService,
    ctx: Callable[..., CallContext],
    reviewed_request: int,
) -> int:
    """Finalize the reviewed request at block height 20 (deadline 164)."""
    service.finalize_decision(ctx("anyone", 20), reviewed_request)
    return reviewed_request


@pytest.fixture()
def concurrent_insert(engine: Engine) -> Iterator[Callable[[str, str, tuple], None]]:
    """Let a rival writer insert a row right before the session's next INSERT into a table.

    The rival statement runs on the same cursor just ahead of the session's
    own INSERT, which is the interleaving a second connection can produce
    after this session has checked that the key is free.
    """
    listeners = []

    def arm(table: str, sql: str, params: tuple) -> None:
        target = re.compile(rf'\s*INSERT INTO "?{table}"?[\s(]', re.IGNORECASE)
        fired = False

        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            nonlocal fired
            if not fired and target.match(statement):
                fired = True
                cursor.execute(sql, params)

        event.listen(engine, "before_cursor_execute", before_cursor_execute)
        listeners.append(before_cursor_execute)

    yield arm

    for listener in listeners:
        event.remove(engine, "before_cursor_execute", listener)
