"""
psvault/database.py — Conexão assíncrona via SQLAlchemy.

Nada de engine global: `create_app` monta engine + sessionmaker
e entrega o sessionmaker para cada store que precisa dele.
"""
from sqlalchemy import event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite(dbapi_conn, _record):
    # SQLite só respeita ON DELETE CASCADE com foreign_keys ligado por conexão
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # lower() nativo só conhece ASCII; ilike vira lower(x) LIKE lower(y)
    dbapi_conn.create_function("lower", 1, _unicode_lower)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    kwargs = {"echo": echo}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
        # banco em memória precisa de uma única conexão compartilhada
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_async_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _configure_sqlite)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine):
    """Cria todas as tabelas se não existirem."""
    from psvault.models import audit_log, device, secret, user, vault  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def dialect_insert(session: AsyncSession, model):
    """
    INSERT com suporte a ON CONFLICT no dialeto do banco atual.

    PostgreSQL e SQLite expõem a mesma API (`on_conflict_do_update`),
    então os stores não precisam saber qual banco está por trás.
    """
    if session.bind.dialect.name == "postgresql":
        return postgresql.insert(model)
    return sqlite.insert(model)
