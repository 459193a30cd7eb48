"""
psvault/controllers/audit_controller.py — Consulta da própria trilha de auditoria.
"""
from datetime import datetime
from typing import Optional

from psvault.controllers.schemas import CamelModel
from psvault.models.audit_log import AuditAction, AuditLog
from psvault.stores.audit_store import AuditSink


class AuditLogRead(CamelModel):
    id: int
    user_id: str
    vault_id: Optional[str]
    secret_id: Optional[str]
    action: AuditAction
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime


class AuditController:

    def __init__(self, audit: AuditSink, default_limit: int = 50, max_limit: int = 500):
        self._audit = audit
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def list_for_user(self, user_id: str, limit: Optional[int] = None) -> list[AuditLog]:
        """Últimas entradas do usuário; `limit` é limitado a [1, max_limit]."""
        limit = self._default_limit if limit is None else limit
        limit = max(1, min(limit, self._max_limit))
        return await self._audit.list_by_user(user_id, limit)
