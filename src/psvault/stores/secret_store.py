"""
psvault/stores/secret_store.py — Secrets + metadata como unidade atômica.

Regras:
  - create/update gravam secret e metadata na MESMA transação;
    qualquer falha desfaz as duas linhas
  - leitura sempre traz o par; secret sem metadata é erro de integridade,
    nunca um metadata nulo
  - search é sempre restrito aos vaults do usuário (JOIN em vaults),
    independente dos filtros passados
"""
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional

from loguru import logger
from sqlalchemy import delete, exists, func, select, update

from psvault.exceptions import IntegrityViolation
from psvault.models.secret import Secret, SecretMetadata, SecretType
from psvault.models.vault import Vault
from psvault.stores.base import BaseStore, store_errors


class SecretRecord(NamedTuple):
    secret: Secret
    metadata: SecretMetadata


@dataclass(frozen=True)
class SecretFilter:
    """Filtros opcionais da busca. Campo None = não filtra."""

    vault_id: Optional[str] = None
    type: Optional[SecretType] = None
    title: Optional[str] = None     # substring, sem diferenciar maiúsculas
    domain: Optional[str] = None    # substring, sem diferenciar maiúsculas
    tags: Optional[tuple[str, ...]] = None  # basta uma tag em comum


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _tags_overlap(dialect: str, tags):
    if dialect == "postgresql":
        elements = func.jsonb_array_elements_text(SecretMetadata.tags).table_valued("value")
    else:
        elements = func.json_each(SecretMetadata.tags).table_valued("value")
    return exists(select(1).select_from(elements).where(elements.c.value.in_(list(tags))))


class SecretStore(BaseStore):

    @staticmethod
    def _base_query():
        return select(Secret, SecretMetadata).outerjoin(
            SecretMetadata, SecretMetadata.secret_id == Secret.id
        )

    @staticmethod
    def _record(row) -> SecretRecord:
        secret, metadata = row
        if metadata is None:
            logger.error(f"🚨 Secret {secret.id} sem metadata — invariante violada")
            raise IntegrityViolation(f"Secret {secret.id} sem metadata.")
        return SecretRecord(secret, metadata)

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------

    @store_errors("criar secret")
    async def create(self, secret: Secret, metadata: SecretMetadata) -> SecretRecord:
        """Insere secret, pega o id gerado e insere o metadata — tudo ou nada."""
        async with self._sessions() as db:
            async with db.begin():
                db.add(secret)
                await db.flush()
                metadata.secret_id = secret.id
                db.add(metadata)
        return SecretRecord(secret, metadata)

    @store_errors("atualizar secret")
    async def update(self, secret: Secret, metadata: SecretMetadata) -> SecretRecord | None:
        """
        Regrava payload/versão e o metadata inteiro numa transação.
        Retorna None se o secret não existe mais.
        """
        now = datetime.utcnow()
        async with self._sessions() as db:
            async with db.begin():
                result = await db.execute(
                    update(Secret)
                    .where(Secret.id == secret.id)
                    .values(
                        encrypted_payload=secret.encrypted_payload,
                        encryption_version=secret.encryption_version,
                        updated_at=now,
                    )
                )
                if result.rowcount == 0:
                    return None

                result = await db.execute(
                    update(SecretMetadata)
                    .where(SecretMetadata.secret_id == secret.id)
                    .values(
                        title=metadata.title,
                        domain=metadata.domain,
                        tags=list(metadata.tags or []),
                        updated_at=now,
                    )
                )
                if result.rowcount == 0:
                    # sai do bloco com exceção → rollback do secret também
                    raise IntegrityViolation(f"Secret {secret.id} sem metadata.")

        secret.updated_at = now
        metadata.updated_at = now
        return SecretRecord(secret, metadata)

    @store_errors("atualizar último acesso")
    async def update_last_accessed(self, secret_id: str) -> bool:
        """Escrita lateral, fora da transação de leitura. Não mexe em updated_at."""
        async with self._sessions() as db:
            result = await db.execute(
                update(Secret)
                .where(Secret.id == secret_id)
                .values(last_accessed_at=datetime.utcnow(), updated_at=Secret.updated_at)
            )
            await db.commit()
        return result.rowcount > 0

    @store_errors("remover secret")
    async def delete(self, secret_id: str) -> bool:
        """Remove o secret; o metadata sai por cascade."""
        async with self._sessions() as db:
            result = await db.execute(delete(Secret).where(Secret.id == secret_id))
            await db.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------

    @store_errors("buscar secret")
    async def get_by_id(self, secret_id: str) -> SecretRecord | None:
        async with self._sessions() as db:
            result = await db.execute(self._base_query().where(Secret.id == secret_id))
            row = result.first()
        if row is None:
            return None
        return self._record(row)

    @store_errors("listar secrets")
    async def list_by_vault(self, vault_id: str) -> list[SecretRecord]:
        """Secrets do vault, mais recentes primeiro."""
        async with self._sessions() as db:
            result = await db.execute(
                self._base_query()
                .where(Secret.vault_id == vault_id)
                .order_by(Secret.created_at.desc(), Secret.id.desc())
            )
            rows = result.all()
        return [self._record(row) for row in rows]

    @store_errors("pesquisar secrets")
    async def search(self, user_id: str, filters: SecretFilter | None = None) -> list[SecretRecord]:
        """
        Busca nos vaults do usuário.

        O JOIN com vaults + user_id vem antes de qualquer filtro,
        então nenhum filtro consegue enxergar secrets de outro usuário.
        """
        filters = filters or SecretFilter()
        async with self._sessions() as db:
            stmt = (
                self._base_query()
                .join(Vault, Vault.id == Secret.vault_id)
                .where(Vault.user_id == user_id)
            )

            if filters.vault_id:
                stmt = stmt.where(Secret.vault_id == filters.vault_id)
            if filters.type:
                stmt = stmt.where(Secret.type == SecretType(filters.type))
            if filters.title:
                stmt = stmt.where(
                    SecretMetadata.title.ilike(f"%{_escape_like(filters.title)}%", escape="\\")
                )
            if filters.domain:
                stmt = stmt.where(
                    SecretMetadata.domain.ilike(f"%{_escape_like(filters.domain)}%", escape="\\")
                )
            if filters.tags:
                stmt = stmt.where(_tags_overlap(db.bind.dialect.name, filters.tags))

            result = await db.execute(stmt.order_by(Secret.created_at.desc(), Secret.id.desc()))
            rows = result.all()
        return [self._record(row) for row in rows]
