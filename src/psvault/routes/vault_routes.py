"""
psvault/routes/vault_routes.py — CRUD de vaults do usuário autenticado.

  POST   /api/vaults        → cria
  GET    /api/vaults        → lista (mais recentes primeiro)
  GET    /api/vaults/{id}   → um vault
  PUT    /api/vaults/{id}   → altera name/description
  DELETE /api/vaults/{id}   → remove (leva secrets junto)
"""
from fastapi import APIRouter, Depends, Response, status

from psvault.controllers.schemas import RequestMeta
from psvault.controllers.vault_controller import (
    VaultController,
    VaultCreate,
    VaultPatch,
    VaultRead,
    VaultUpdate,
)
from psvault.middlewares.auth import require_user
from psvault.routes.deps import request_meta, vault_controller

router = APIRouter(prefix="/api/vaults", tags=["Vaults"])


@router.post("", response_model=VaultRead, status_code=status.HTTP_201_CREATED, summary="Criar vault")
async def create_vault(
    body: VaultCreate,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: VaultController = Depends(vault_controller),
):
    return await controller.create(user_id, body, meta)


@router.get("", response_model=list[VaultRead], summary="Listar vaults")
async def list_vaults(
    user_id: str = Depends(require_user),
    controller: VaultController = Depends(vault_controller),
):
    return await controller.list_for_user(user_id)


@router.get("/{vault_id}", response_model=VaultRead, summary="Buscar vault")
async def get_vault(
    vault_id: str,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: VaultController = Depends(vault_controller),
):
    return await controller.get(user_id, vault_id, meta)


@router.put("/{vault_id}", response_model=VaultRead, summary="Atualizar vault")
async def update_vault(
    vault_id: str,
    body: VaultUpdate,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: VaultController = Depends(vault_controller),
):
    """Só os campos enviados mudam. `description: null` limpa a descrição."""
    return await controller.update(user_id, vault_id, VaultPatch.from_request(body), meta)


@router.delete("/{vault_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
               summary="Remover vault")
async def delete_vault(
    vault_id: str,
    user_id: str = Depends(require_user),
    meta: RequestMeta = Depends(request_meta),
    controller: VaultController = Depends(vault_controller),
):
    """Remove o vault e, em cascata, todos os seus secrets. Irreversível."""
    await controller.delete(user_id, vault_id, meta)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
