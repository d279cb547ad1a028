import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from playlist_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from playlist_auth.app.services.mail_sender import MailDeliveryStatus, MailSender
from playlist_auth.app.services.password_hasher import PasswordHasher
from playlist_auth.depends import get_mail_sender, get_password_hasher, get_unit_of_work
from playlist_auth.domain import entities  # noqa: F401  registers tables on SQLModel.metadata


class FakeMailSender(MailSender):
    """Records outgoing reset mails instead of talking to SMTP"""

    def __init__(self):
        self.sent = []
        self.status = MailDeliveryStatus.sent

    async def send_password_reset(self, recipient, username, reset_link):
        self.sent.append(
            {"recipient": recipient, "username": username, "reset_link": reset_link}
        )
        return self.status


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mail_sender():
    return FakeMailSender()


@pytest_asyncio.fixture
async def client(db_session, mail_sender):
    from playlist_auth.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    fast_hasher = PasswordHasher(rounds=4)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_password_hasher] = lambda: fast_hasher
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
