"""
psvault/models/secret.py — Segredos cifrados e seus metadados pesquisáveis.

Secret e SecretMetadata são um par 1:1:
  - secrets          → payload opaco (cifrado no cliente)
  - secret_metadata  → título, domínio e tags em texto claro, para busca

Os dois são gravados sempre na mesma transação (ver SecretStore).
Apagar o secret leva junto o metadata (ON DELETE CASCADE), e apagar
o vault leva junto os secrets.
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from psvault.database import Base


class SecretType(str, enum.Enum):
    PASSWORD = "password"
    NOTE = "note"
    API_KEY = "api_key"
    CARD = "card"


class Secret(Base):
    __tablename__ = "secrets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vault_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vaults.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[SecretType] = mapped_column(
        Enum(SecretType, name="secret_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    # Cifrado no cliente — o servidor não lê
    encrypted_payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    encryption_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    last_accessed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class SecretMetadata(Base):
    __tablename__ = "secret_metadata"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    secret_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("secrets.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # lista de strings; JSONB no Postgres para o filtro de interseção
    tags: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
