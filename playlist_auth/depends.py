from datetime import timedelta

from fastapi import Depends, Request
from fastapi_mail import ConnectionConfig
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from playlist_auth.adapter.services.mail_sender import FastMailSender
from playlist_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from playlist_auth.api.utils.auth_gate import AuthGate, Identity
from playlist_auth.app.services.mail_sender import MailSender
from playlist_auth.app.services.password_hasher import PasswordHasher
from playlist_auth.app.services.session_token_issuer import SessionTokenIssuer

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

password_hasher = PasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)

session_token_issuer = SessionTokenIssuer(
    secret=ApplicationConfig.JWT_SECRET,
    ttl=timedelta(hours=ApplicationConfig.SESSION_TOKEN_TTL_HOURS),
)

mail_config = ConnectionConfig(
    MAIL_USERNAME=ApplicationConfig.MAIL_USERNAME,
    MAIL_PASSWORD=ApplicationConfig.MAIL_PASSWORD,
    MAIL_FROM=ApplicationConfig.MAIL_FROM,
    MAIL_FROM_NAME=ApplicationConfig.MAIL_FROM_NAME,
    MAIL_PORT=ApplicationConfig.MAIL_PORT,
    MAIL_SERVER=ApplicationConfig.MAIL_SERVER,
    MAIL_STARTTLS=ApplicationConfig.MAIL_STARTTLS,
    MAIL_SSL_TLS=ApplicationConfig.MAIL_SSL_TLS,
    USE_CREDENTIALS=bool(ApplicationConfig.MAIL_USERNAME),
    SUPPRESS_SEND=int(ApplicationConfig.MAIL_SUPPRESS_SEND),
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_hasher() -> PasswordHasher:
    return password_hasher


def get_session_token_issuer() -> SessionTokenIssuer:
    return session_token_issuer


def get_mail_sender() -> MailSender:
    return FastMailSender(mail_config)


def get_current_identity(
    request: Request,
    token_issuer: SessionTokenIssuer = Depends(get_session_token_issuer),
) -> Identity:
    """
    Dependency guarding authenticated routes.

    Returns:
        Identity of the caller

    Raises:
        ClientError: 401 if the session token is missing, invalid or expired
    """
    gate = AuthGate(token_issuer, ApplicationConfig.SESSION_COOKIE_NAME)
    return gate.require(request)
