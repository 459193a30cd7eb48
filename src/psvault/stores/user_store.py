"""
psvault/stores/user_store.py — Registro de usuários vistos pela API.
"""
from datetime import datetime

from psvault.database import dialect_insert
from psvault.models.user import User
from psvault.stores.base import BaseStore, store_errors


class UserStore(BaseStore):

    @store_errors("registrar usuário")
    async def ensure(self, user_id: str, email: str | None = None) -> None:
        """Upsert: cria o usuário na primeira vez, depois só atualiza last_seen_at."""
        now = datetime.utcnow()
        async with self._sessions() as db:
            stmt = dialect_insert(db, User).values(
                id=user_id, email=email, created_at=now, last_seen_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[User.id],
                set_={"last_seen_at": stmt.excluded.last_seen_at},
            )
            await db.execute(stmt)
            await db.commit()

    @store_errors("buscar usuário")
    async def get_by_id(self, user_id: str) -> User | None:
        async with self._sessions() as db:
            return await db.get(User, user_id)
