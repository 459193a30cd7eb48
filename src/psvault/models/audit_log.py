"""
psvault/models/audit_log.py — Log imutável de ações sobre vaults e secrets.

vault_id / secret_id são referências soltas (sem FK): apagar um vault
não pode apagar nem bloquear o histórico de quem mexeu nele.
"""
import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from psvault.database import Base


class AuditAction(str, enum.Enum):
    CREATE = "create"
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    vault_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    secret_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    action: Mapped[AuditAction] = mapped_column(
        Enum(AuditAction, name="audit_action", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    ip_address: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
