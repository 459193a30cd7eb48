"""
psvault/routes/deps.py — Dependências FastAPI compartilhadas pelas rotas.

Os controllers são montados uma vez em `create_app` e ficam em app.state.
"""
from fastapi import Request

from psvault.controllers.audit_controller import AuditController
from psvault.controllers.device_controller import DeviceController
from psvault.controllers.schemas import RequestMeta
from psvault.controllers.secret_controller import SecretController
from psvault.controllers.vault_controller import VaultController


def request_meta(request: Request) -> RequestMeta:
    return RequestMeta(
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def vault_controller(request: Request) -> VaultController:
    return request.app.state.vault_controller


def secret_controller(request: Request) -> SecretController:
    return request.app.state.secret_controller


def device_controller(request: Request) -> DeviceController:
    return request.app.state.device_controller


def audit_controller(request: Request) -> AuditController:
    return request.app.state.audit_controller
