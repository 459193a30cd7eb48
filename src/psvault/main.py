"""
psvault/main.py — Ponto de entrada do psvault.

`create_app` monta tudo explicitamente, sem registro global:
  engine → sessionmaker → stores → controllers → app.state

Subir em dev:
    uvicorn --factory psvault.main:create_app --port 8003
"""
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from psvault.config import Settings, get_settings
from psvault.controllers.audit_controller import AuditController
from psvault.controllers.device_controller import DeviceController
from psvault.controllers.secret_controller import SecretController
from psvault.controllers.vault_controller import VaultController
from psvault.database import build_engine, build_session_factory, init_db
from psvault.exceptions import NotFoundError, StoreError, UnauthorizedError
from psvault.routes.audit_routes import router as audit_router
from psvault.routes.device_routes import router as device_router
from psvault.routes.secret_routes import router as secret_router
from psvault.routes.vault_routes import router as vault_router
from psvault.stores import AuditSink, DeviceRegistry, SecretStore, UserStore, VaultStore


_sink_id: int | None = None


def _configure_logging(level: str) -> int:
    """Troca só o sink do psvault; sinks instalados por quem embute o app ficam."""
    global _sink_id
    if _sink_id is not None:
        logger.remove(_sink_id)
    _sink_id = logger.add(sys.stderr, level=level)
    return _sink_id


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    _configure_logging(settings.LOG_LEVEL)

    engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    sessions = build_session_factory(engine)

    vaults = VaultStore(sessions)
    secrets = SecretStore(sessions)
    devices = DeviceRegistry(sessions)
    audit = AuditSink(sessions)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ---------- Startup ----------
        logger.info(f"🔐 {settings.APP_NAME} iniciando ({settings.APP_ENV})…")
        await init_db(engine)

        yield

        # ---------- Shutdown ----------
        await engine.dispose()
        logger.info("🔒 psvault encerrado.")

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Cofres de segredos cifrados no cliente, com metadata pesquisável e auditoria.",
        lifespan=lifespan,
        docs_url="/docs" if settings.APP_ENV == "development" else None,
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.users = UserStore(sessions)
    app.state.vault_controller = VaultController(vaults, audit)
    app.state.secret_controller = SecretController(secrets, vaults, audit)
    app.state.device_controller = DeviceController(devices)
    app.state.audit_controller = AuditController(
        audit, settings.AUDIT_LIST_LIMIT, settings.AUDIT_LIST_MAX
    )

    app.include_router(vault_router)
    app.include_router(secret_router)
    app.include_router(device_router)
    app.include_router(audit_router)

    # "não existe" e "não é seu" respondem igual — não vaza existência
    @app.exception_handler(NotFoundError)
    @app.exception_handler(UnauthorizedError)
    async def _not_found(request: Request, exc):
        logger.debug(f"{request.method} {request.url.path} → 404 ({exc})")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Recurso não encontrado."},
        )

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError):
        logger.error(f"{request.method} {request.url.path} → 500 ({exc})")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Erro interno. Tente novamente."},
        )

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "service": settings.APP_NAME}

    return app


def run():
    import uvicorn

    global _sink_id
    settings = get_settings()
    # processo próprio: o sink padrão do loguru sai, fica só o nosso
    logger.remove()
    _sink_id = None
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.APP_PORT)
