"""
psvault/models/user.py — Usuários conhecidos pelo psvault.

O id vem pronto do provedor de autenticação (claim `sub` do JWT).
A linha existe só para que vaults e devices tenham um dono real
referenciado por FK; é criada/atualizada a cada request autenticado.
"""
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from psvault.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_seen_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
