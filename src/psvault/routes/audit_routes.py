"""
psvault/routes/audit_routes.py — Trilha de auditoria do próprio usuário (somente leitura).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from psvault.controllers.audit_controller import AuditController, AuditLogRead
from psvault.middlewares.auth import require_user
from psvault.routes.deps import audit_controller

router = APIRouter(prefix="/api/audit-logs", tags=["Audit"])


@router.get("", response_model=list[AuditLogRead], summary="Últimas ações do usuário")
async def list_audit_logs(
    limit: Optional[int] = Query(None, ge=1),
    user_id: str = Depends(require_user),
    controller: AuditController = Depends(audit_controller),
):
    return await controller.list_for_user(user_id, limit)
