"""
psvault/controllers/secret_controller.py — Casos de uso de secrets.

O vault não interpreta o payload: recebe bytes cifrados pelo cliente,
guarda, devolve. O que o servidor enxerga é só o metadata
(título, domínio, tags) usado na busca.

Toda operação num secret existente resolve o vault dono primeiro
(guard.require_secret). Depois da escrita principal:
  - last_accessed_at (só no GET) → best-effort
  - auditoria                    → best-effort
Nenhum dos dois mexe no resultado da operação.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Optional

from loguru import logger
from pydantic import Base64Bytes, Field, StringConstraints, field_validator

from psvault.controllers.guard import require_secret, require_vault
from psvault.controllers.schemas import UNSET, CamelModel, OpaqueBytes, RequestMeta, is_set
from psvault.exceptions import NotFoundError, StoreError
from psvault.models.audit_log import AuditAction
from psvault.models.secret import Secret, SecretMetadata, SecretType
from psvault.stores.audit_store import AuditSink
from psvault.stores.secret_store import SecretFilter, SecretRecord, SecretStore
from psvault.stores.vault_store import VaultStore

Tag = Annotated[str, StringConstraints(min_length=1, max_length=50)]


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SecretMetadataIn(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    domain: Optional[str] = Field(None, max_length=255)
    tags: list[Tag] = Field(default_factory=list)


class SecretCreate(CamelModel):
    vault_id: str
    type: SecretType
    encrypted_payload: Base64Bytes
    encryption_version: int = Field(ge=1)
    metadata: SecretMetadataIn


class SecretUpdate(CamelModel):
    encrypted_payload: Optional[Base64Bytes] = None
    encryption_version: Optional[int] = Field(None, ge=1)
    metadata: Optional[SecretMetadataIn] = None

    @field_validator("encrypted_payload", "encryption_version", "metadata")
    @classmethod
    def not_null(cls, v):
        # omitir o campo = não mexe; null explícito não faz sentido aqui
        if v is None:
            raise ValueError("campo não pode ser nulo — omita para manter o valor atual.")
        return v


class SecretMetadataRead(CamelModel):
    title: str
    domain: Optional[str]
    tags: list[str]


class SecretRead(CamelModel):
    id: str
    vault_id: str
    type: SecretType
    encrypted_payload: OpaqueBytes
    encryption_version: int
    metadata: SecretMetadataRead
    last_accessed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: SecretRecord) -> "SecretRead":
        s, m = record
        return cls(
            id=s.id,
            vault_id=s.vault_id,
            type=s.type,
            encrypted_payload=s.encrypted_payload,
            encryption_version=s.encryption_version,
            metadata=SecretMetadataRead(title=m.title, domain=m.domain, tags=list(m.tags or [])),
            last_accessed_at=s.last_accessed_at,
            created_at=s.created_at,
            updated_at=s.updated_at,
        )


@dataclass(frozen=True)
class SecretPatch:
    encrypted_payload: Any = UNSET
    encryption_version: Any = UNSET
    metadata: Any = UNSET  # SecretMetadataIn — substitui o metadata inteiro

    @classmethod
    def from_request(cls, body: SecretUpdate) -> "SecretPatch":
        fields = {name: getattr(body, name) for name in body.model_fields_set}
        return cls(**fields)


def _unique_tags(tags) -> list[str]:
    # tags são um conjunto; mantém a ordem de chegada
    return list(dict.fromkeys(tags or []))


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class SecretController:

    def __init__(self, secrets: SecretStore, vaults: VaultStore, audit: AuditSink):
        self._secrets = secrets
        self._vaults = vaults
        self._audit = audit

    async def _log(self, user_id, action, vault_id, secret_id, meta: Optional[RequestMeta]):
        meta = meta or RequestMeta()
        await self._audit.record(
            user_id,
            action,
            vault_id=vault_id,
            secret_id=secret_id,
            ip=meta.ip,
            user_agent=meta.user_agent,
        )

    async def _touch(self, secret_id: str) -> None:
        try:
            await self._secrets.update_last_accessed(secret_id)
        except StoreError as e:
            logger.warning(f"⚠️  last_accessed_at não atualizado (secret={secret_id}): {e}")

    async def create(
        self,
        user_id: str,
        data: SecretCreate,
        meta: Optional[RequestMeta] = None,
    ) -> SecretRecord:
        await require_vault(self._vaults, data.vault_id, user_id)

        record = await self._secrets.create(
            Secret(
                vault_id=data.vault_id,
                type=data.type,
                encrypted_payload=data.encrypted_payload,
                encryption_version=data.encryption_version,
            ),
            SecretMetadata(
                title=data.metadata.title,
                domain=data.metadata.domain,
                tags=_unique_tags(data.metadata.tags),
            ),
        )
        logger.info(f"🔐 Secret criado — id={record.secret.id} vault={data.vault_id}")
        await self._log(user_id, AuditAction.CREATE, data.vault_id, record.secret.id, meta)
        return record

    async def get(
        self,
        user_id: str,
        secret_id: str,
        meta: Optional[RequestMeta] = None,
    ) -> SecretRecord:
        record, vault = await require_secret(self._secrets, self._vaults, secret_id, user_id)
        await self._touch(secret_id)
        await self._log(user_id, AuditAction.VIEW, vault.id, secret_id, meta)
        return record

    async def list_by_vault(self, user_id: str, vault_id: str) -> list[SecretRecord]:
        await require_vault(self._vaults, vault_id, user_id)
        return await self._secrets.list_by_vault(vault_id)

    async def search(self, user_id: str, filters: SecretFilter | None = None) -> list[SecretRecord]:
        # o escopo por usuário é garantido pelo próprio store
        return await self._secrets.search(user_id, filters)

    async def update(
        self,
        user_id: str,
        secret_id: str,
        patch: SecretPatch,
        meta: Optional[RequestMeta] = None,
    ) -> SecretRecord:
        record, vault = await require_secret(self._secrets, self._vaults, secret_id, user_id)
        secret, metadata = record

        if is_set(patch.encrypted_payload):
            secret.encrypted_payload = patch.encrypted_payload
        if is_set(patch.encryption_version):
            secret.encryption_version = patch.encryption_version
        if is_set(patch.metadata):
            metadata.title = patch.metadata.title
            metadata.domain = patch.metadata.domain
            metadata.tags = _unique_tags(patch.metadata.tags)

        updated = await self._secrets.update(secret, metadata)
        if updated is None:
            raise NotFoundError("secret", secret_id)

        await self._log(user_id, AuditAction.UPDATE, vault.id, secret_id, meta)
        return updated

    async def delete(
        self,
        user_id: str,
        secret_id: str,
        meta: Optional[RequestMeta] = None,
    ) -> None:
        _, vault = await require_secret(self._secrets, self._vaults, secret_id, user_id)
        if not await self._secrets.delete(secret_id):
            raise NotFoundError("secret", secret_id)
        logger.info(f"🗑️  Secret removido — id={secret_id} vault={vault.id}")
        await self._log(user_id, AuditAction.DELETE, vault.id, secret_id, meta)
