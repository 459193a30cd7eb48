"""
psvault/stores/audit_store.py — Trilha de auditoria (append-only).

Só INSERT e SELECT: nenhuma linha é alterada ou apagada depois de escrita.

`log` propaga StoreError. Os controllers usam `record`, que é best-effort:
roda depois da transação principal, numa sessão própria, e se falhar
só deixa um warning — auditoria nunca derruba a operação que a gerou.
"""
from loguru import logger
from sqlalchemy import select

from psvault.exceptions import StoreError
from psvault.models.audit_log import AuditAction, AuditLog
from psvault.stores.base import BaseStore, store_errors


class AuditSink(BaseStore):

    @store_errors("gravar auditoria")
    async def log(self, entry: AuditLog) -> AuditLog:
        """Insere a entrada e devolve com id e created_at preenchidos."""
        async with self._sessions() as db:
            db.add(entry)
            await db.commit()
            await db.refresh(entry)
        return entry

    async def record(
        self,
        user_id: str,
        action: AuditAction,
        vault_id: str | None = None,
        secret_id: str | None = None,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            vault_id=vault_id,
            secret_id=secret_id,
            ip_address=ip,
            user_agent=user_agent,
        )
        try:
            return await self.log(entry)
        except StoreError as e:
            logger.warning(
                f"⚠️  Auditoria não gravada ({action.value} user={user_id} "
                f"vault={vault_id} secret={secret_id}): {e}"
            )
            return None

    @store_errors("listar auditoria")
    async def list_by_user(self, user_id: str, limit: int = 50) -> list[AuditLog]:
        """Entradas do usuário, mais recentes primeiro, no máximo `limit`."""
        async with self._sessions() as db:
            result = await db.execute(
                select(AuditLog)
                .where(AuditLog.user_id == user_id)
                .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())
