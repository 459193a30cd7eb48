"""
psvault/controllers/guard.py — Regra de posse (ownership).

Todo acesso a vault ou secret passa por aqui antes de tocar no store:
  1. resolve o vault dono (direto, ou via secret.vault_id)
  2. vault ausente           → NotFoundError
  3. vault de outro usuário  → UnauthorizedError
Só segue com match exato de user_id. Na dúvida, falha.
"""
from loguru import logger

from psvault.exceptions import NotFoundError, UnauthorizedError
from psvault.models.vault import Vault
from psvault.stores.secret_store import SecretRecord, SecretStore
from psvault.stores.vault_store import VaultStore


async def require_vault(vaults: VaultStore, vault_id: str, user_id: str) -> Vault:
    vault = await vaults.get_by_id(vault_id)
    if vault is None:
        raise NotFoundError("vault", vault_id)
    if vault.user_id != user_id:
        logger.warning(f"🚫 user={user_id} tentou acessar vault={vault_id}")
        raise UnauthorizedError("vault", vault_id, user_id)
    return vault


async def require_secret(
    secrets: SecretStore,
    vaults: VaultStore,
    secret_id: str,
    user_id: str,
) -> tuple[SecretRecord, Vault]:
    record = await secrets.get_by_id(secret_id)
    if record is None:
        raise NotFoundError("secret", secret_id)

    vault = await vaults.get_by_id(record.secret.vault_id)
    if vault is None:
        raise NotFoundError("secret", secret_id)
    if vault.user_id != user_id:
        logger.warning(f"🚫 user={user_id} tentou acessar secret={secret_id}")
        raise UnauthorizedError("secret", secret_id, user_id)
    return record, vault
