"""
psvault/stores/device_store.py — Registro idempotente de dispositivos.

Um único INSERT ... ON CONFLICT (user_id, device_fingerprint) DO UPDATE:
o banco serializa registros concorrentes do mesmo par, sem lock na aplicação.
Último a escrever vence.
"""
import uuid
from datetime import datetime

from sqlalchemy import delete, select

from psvault.database import dialect_insert
from psvault.models.device import Device
from psvault.stores.base import BaseStore, store_errors


class DeviceRegistry(BaseStore):

    @store_errors("registrar device")
    async def register(
        self,
        user_id: str,
        fingerprint: str,
        seen_at: datetime | None = None,
    ) -> Device:
        now = seen_at or datetime.utcnow()
        async with self._sessions() as db:
            stmt = dialect_insert(db, Device).values(
                id=str(uuid.uuid4()),
                user_id=user_id,
                device_fingerprint=fingerprint,
                last_seen_at=now,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[Device.user_id, Device.device_fingerprint],
                set_={
                    "last_seen_at": stmt.excluded.last_seen_at,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            device = await db.scalar(
                stmt.returning(Device),
                execution_options={"populate_existing": True},
            )
            await db.commit()
        return device

    @store_errors("buscar device")
    async def get_by_id(self, device_id: str) -> Device | None:
        async with self._sessions() as db:
            return await db.get(Device, device_id)

    @store_errors("listar devices")
    async def list_by_user(self, user_id: str) -> list[Device]:
        """Devices do usuário, vistos mais recentemente primeiro."""
        async with self._sessions() as db:
            result = await db.execute(
                select(Device)
                .where(Device.user_id == user_id)
                .order_by(Device.last_seen_at.desc())
            )
            return list(result.scalars().all())

    @store_errors("remover device")
    async def delete(self, device_id: str) -> bool:
        async with self._sessions() as db:
            result = await db.execute(delete(Device).where(Device.id == device_id))
            await db.commit()
        return result.rowcount > 0
