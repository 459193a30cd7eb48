"""
psvault/controllers/vault_controller.py — Casos de uso de vaults.

Fluxo de cada operação:
  guard (dono confere?) → VaultStore → AuditSink (best-effort)
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from loguru import logger
from pydantic import Base64Bytes, Field, field_validator

from psvault.controllers.guard import require_vault
from psvault.controllers.schemas import UNSET, CamelModel, OpaqueBytes, RequestMeta, is_set
from psvault.exceptions import NotFoundError
from psvault.models.audit_log import AuditAction
from psvault.models.vault import Vault
from psvault.stores.audit_store import AuditSink
from psvault.stores.vault_store import VaultStore


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class VaultCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    encrypted_key: Optional[Base64Bytes] = None
    key_encryption_version: Optional[int] = Field(None, ge=1)


class VaultUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)  # null = limpar

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("name não pode ser nulo.")
        return v


class VaultRead(CamelModel):
    id: str
    user_id: str
    name: str
    description: Optional[str]
    encrypted_key: Optional[OpaqueBytes]
    key_encryption_version: Optional[int]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class VaultPatch:
    name: Any = UNSET
    description: Any = UNSET

    @classmethod
    def from_request(cls, body: VaultUpdate) -> "VaultPatch":
        return cls(**body.model_dump(exclude_unset=True))


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class VaultController:

    def __init__(self, vaults: VaultStore, audit: AuditSink):
        self._vaults = vaults
        self._audit = audit

    async def _log(self, user_id, action, vault_id, meta: Optional[RequestMeta]):
        meta = meta or RequestMeta()
        await self._audit.record(
            user_id, action, vault_id=vault_id, ip=meta.ip, user_agent=meta.user_agent,
        )

    async def create(
        self,
        user_id: str,
        data: VaultCreate,
        meta: Optional[RequestMeta] = None,
    ) -> Vault:
        vault = await self._vaults.create(Vault(
            user_id=user_id,
            name=data.name,
            description=data.description,
            encrypted_key=data.encrypted_key,
            key_encryption_version=data.key_encryption_version,
        ))
        logger.info(f"🗄️  Vault criado — id={vault.id} user={user_id}")
        await self._log(user_id, AuditAction.CREATE, vault.id, meta)
        return vault

    async def list_for_user(self, user_id: str) -> list[Vault]:
        return await self._vaults.list_by_user(user_id)

    async def get(
        self,
        user_id: str,
        vault_id: str,
        meta: Optional[RequestMeta] = None,
    ) -> Vault:
        vault = await require_vault(self._vaults, vault_id, user_id)
        await self._log(user_id, AuditAction.VIEW, vault_id, meta)
        return vault

    async def update(
        self,
        user_id: str,
        vault_id: str,
        patch: VaultPatch,
        meta: Optional[RequestMeta] = None,
    ) -> Vault:
        vault = await require_vault(self._vaults, vault_id, user_id)

        if is_set(patch.name):
            vault.name = patch.name
        if is_set(patch.description):
            vault.description = patch.description

        updated = await self._vaults.update(vault)
        if updated is None:
            # removido entre o guard e o update
            raise NotFoundError("vault", vault_id)

        await self._log(user_id, AuditAction.UPDATE, vault_id, meta)
        return updated

    async def delete(
        self,
        user_id: str,
        vault_id: str,
        meta: Optional[RequestMeta] = None,
    ) -> None:
        await require_vault(self._vaults, vault_id, user_id)
        if not await self._vaults.delete(vault_id):
            raise NotFoundError("vault", vault_id)
        logger.info(f"🗑️  Vault removido — id={vault_id} user={user_id}")
        await self._log(user_id, AuditAction.DELETE, vault_id, meta)
