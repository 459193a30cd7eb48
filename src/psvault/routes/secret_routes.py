"""
psvault/routes/secret_routes.py — API de secrets.

Interface:
  POST   /api/secrets                     → cria secret + metadata
  GET    /api/secrets/search              → busca nos vaults do usuário
  GET    /api/secrets/{id}                → um secret (registra view)
  GET    /api/vaults/{vault_id}/secrets   → secrets de um vault
  PUT    /api/secrets/{id}                → atualiza payload e/ou metadata
  DELETE /api/secrets/{id}                → remove

Payloads trafegam em base64 e nunca são decifrados pelo servidor.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from psvault.controllers.schemas import RequestMeta
from psvault.controllers.secret_controller import (
    SecretController,
    SecretCreate,
    SecretPatch,
    SecretRead,
    SecretUpdate,
)
from psvault.middlewares.auth import require_user
from psvault.models.secret import SecretType
from psvault.routes.deps import request_meta, secret_controller
from psvault.stores.secret_store import SecretFilter

router = APIRouter(prefix="/api", tags=["Secrets"])


@router.post("/secrets", response_model=SecretRead, status_code=status.HTTP_201_CREATED,
             summary="Criar secret")
async def create_secret(
    body: SecretCreate,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: SecretController = Depends(secret_controller),
):
    record = await controller.create(user_id, body, meta)
    return SecretRead.from_record(record)


@router.get("/secrets/search", response_model=list[SecretRead], summary="Pesquisar secrets")
async def search_secrets(
    vault_id: Optional[str] = Query(None, alias="vaultId"),
    type: Optional[SecretType] = Query(None),
    title: Optional[str] = Query(None, max_length=200),
    domain: Optional[str] = Query(None, max_length=255),
    tags: Optional[list[str]] = Query(None),
    user_id: str = Depends(require_user),
    controller: SecretController = Depends(secret_controller),
):
    """
    Todos os filtros são opcionais e combinados com AND.
    `title`/`domain` são substrings sem diferenciar maiúsculas;
    `tags` casa se o secret tiver ao menos uma delas (`?tags=a&tags=b`).
    """
    filters = SecretFilter(
        vault_id=vault_id,
        type=type,
        title=title,
        domain=domain,
        tags=tuple(tags) if tags else None,
    )
    records = await controller.search(user_id, filters)
    return [SecretRead.from_record(r) for r in records]


@router.get("/secrets/{secret_id}", response_model=SecretRead, summary="Buscar secret")
async def get_secret(
    secret_id: str,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: SecretController = Depends(secret_controller),
):
    record = await controller.get(user_id, secret_id, meta)
    return SecretRead.from_record(record)


@router.get("/vaults/{vault_id}/secrets", response_model=list[SecretRead],
            summary="Listar secrets do vault")
async def list_vault_secrets(
    vault_id: str,
    user_id: str = Depends(require_user),
    controller: SecretController = Depends(secret_controller),
):
    records = await controller.list_by_vault(user_id, vault_id)
    return [SecretRead.from_record(r) for r in records]


@router.put("/secrets/{secret_id}", response_model=SecretRead, summary="Atualizar secret")
async def update_secret(
    secret_id: str,
    body: SecretUpdate,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: SecretController = Depends(secret_controller),
):
    """Campos omitidos ficam como estão. `metadata`, se enviado, substitui o anterior."""
    record = await controller.update(user_id, secret_id, SecretPatch.from_request(body), meta)
    return SecretRead.from_record(record)


@router.delete("/secrets/{secret_id}", status_code=status.HTTP_204_NO_CONTENT,
               response_class=Response, summary="Remover secret")
async def delete_secret(
    secret_id: str,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: SecretController = Depends(secret_controller),
):
    await controller.delete(user_id, secret_id, meta)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
