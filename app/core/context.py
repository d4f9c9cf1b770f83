# context.py
# Process-wide resources shared by every request handler.

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings
from app.core.hashing import PasswordHasher
from app.core.tokens import TokenService
from app.db.session import build_engine, build_session_factory


@dataclass
class AppContext:
    """
    Built once at startup: one connection pool and one signing key for the
    whole process. Nothing in here is mutated after construction.
    """
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    tokens: TokenService
    hasher: PasswordHasher

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings.DATABASE_URL)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            tokens=TokenService(
                secret_key=settings.SECRET_KEY,
                algorithm=settings.ALGORITHM,
                expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            ),
            hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        )
