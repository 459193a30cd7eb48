"""
psvault/stores/vault_store.py — CRUD de vaults.

Tudo por id primário. Quem filtra por dono é o controller (guard),
não o store.
"""
from datetime import datetime

from sqlalchemy import delete, select, update

from psvault.models.vault import Vault
from psvault.stores.base import BaseStore, store_errors


class VaultStore(BaseStore):

    @store_errors("criar vault")
    async def create(self, vault: Vault) -> Vault:
        async with self._sessions() as db:
            db.add(vault)
            await db.commit()
            await db.refresh(vault)
        return vault

    @store_errors("buscar vault")
    async def get_by_id(self, vault_id: str) -> Vault | None:
        async with self._sessions() as db:
            return await db.get(Vault, vault_id)

    @store_errors("listar vaults")
    async def list_by_user(self, user_id: str) -> list[Vault]:
        """Vaults do usuário, mais recentes primeiro."""
        async with self._sessions() as db:
            result = await db.execute(
                select(Vault)
                .where(Vault.user_id == user_id)
                .order_by(Vault.created_at.desc())
            )
            return list(result.scalars().all())

    @store_errors("atualizar vault")
    async def update(self, vault: Vault) -> Vault | None:
        """Grava apenas name/description e renova updated_at."""
        now = datetime.utcnow()
        async with self._sessions() as db:
            result = await db.execute(
                update(Vault)
                .where(Vault.id == vault.id)
                .values(name=vault.name, description=vault.description, updated_at=now)
            )
            await db.commit()
        if result.rowcount == 0:
            return None
        vault.updated_at = now
        return vault

    @store_errors("remover vault")
    async def delete(self, vault_id: str) -> bool:
        """Remove o vault; secrets e metadata vão junto por cascade."""
        async with self._sessions() as db:
            result = await db.execute(delete(Vault).where(Vault.id == vault_id))
            await db.commit()
        return result.rowcount > 0
