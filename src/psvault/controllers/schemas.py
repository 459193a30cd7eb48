"""
psvault/controllers/schemas.py — Peças comuns dos schemas da API.

  - CamelModel: JSON em camelCase (vaultId, encryptedPayload...),
    mas aceita snake_case na entrada também
  - UNSET: marca "campo não enviado" nos patches, diferente de None
    ("campo enviado e explicitamente limpo")
  - OpaqueBytes: bytes cifrados no cliente, devolvidos como base64
"""
import base64
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


# Na entrada use Base64Bytes; na saída, bytes crus do ORM com este serializer.
OpaqueBytes = Annotated[
    bytes,
    PlainSerializer(
        lambda b: base64.b64encode(b).decode("ascii"), return_type=str, when_used="json"
    ),
]


@dataclass(frozen=True)
class RequestMeta:
    """Origem do request, só para a trilha de auditoria."""

    ip: Optional[str] = None
    user_agent: Optional[str] = None
