"""
Fixtures compartilhadas da suíte do psvault.

Cada teste ganha um SQLite em memória novo (StaticPool), com as tabelas
criadas e foreign keys ligadas — cascades funcionam como em produção.
"""
import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from psvault.config import Settings
from psvault.database import build_engine, build_session_factory, init_db
from psvault.main import create_app
from psvault.models import Secret, SecretMetadata, SecretType, Vault
from psvault.services.jwt_service import create_token
from psvault.stores import AuditSink, DeviceRegistry, SecretStore, UserStore, VaultStore

USER_A = "user_alice"
USER_B = "user_bob"


@pytest.fixture
def settings():
    return Settings(
        JWT_SECRET="test-secret-" + "0" * 40,
        DATABASE_URL="sqlite+aiosqlite://",
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


# ─── Banco + stores ───────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings.DATABASE_URL)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessions(engine):
    return build_session_factory(engine)


@pytest.fixture
def users(sessions):
    return UserStore(sessions)


@pytest.fixture
def vaults(sessions):
    return VaultStore(sessions)


@pytest.fixture
def secrets(sessions):
    return SecretStore(sessions)


@pytest.fixture
def devices(sessions):
    return DeviceRegistry(sessions)


@pytest.fixture
def audit(sessions):
    return AuditSink(sessions)


@pytest_asyncio.fixture
async def known_users(users):
    """Alice e Bob já existem na tabela users."""
    await users.ensure(USER_A)
    await users.ensure(USER_B)
    return USER_A, USER_B


@pytest_asyncio.fixture
async def vault_a(vaults, known_users):
    return await vaults.create(Vault(user_id=USER_A, name="Personal", encrypted_key=b"k-a"))


@pytest_asyncio.fixture
async def vault_b(vaults, known_users):
    return await vaults.create(Vault(user_id=USER_B, name="Work", encrypted_key=b"k-b"))


def new_secret(vault_id, title="Bank", *, type=SecretType.PASSWORD, payload=b"x",
               domain=None, tags=None):
    """Par (Secret, SecretMetadata) pronto para SecretStore.create."""
    return (
        Secret(vault_id=vault_id, type=type, encrypted_payload=payload, encryption_version=1),
        SecretMetadata(title=title, domain=domain, tags=list(tags or [])),
    )


# ─── HTTP ─────────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    # ASGITransport não dispara o lifespan — cria as tabelas aqui
    await init_db(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth(settings):
    """auth(user_id) → headers com Bearer JWT válido."""

    def _headers(user_id: str) -> dict:
        token = create_token(user_id, settings)["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers
