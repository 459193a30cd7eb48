"""
psvault/controllers/device_controller.py — Registro de dispositivos.

Devices não geram entradas de auditoria.
"""
from datetime import datetime

from loguru import logger
from pydantic import Field

from psvault.controllers.schemas import CamelModel
from psvault.exceptions import NotFoundError, UnauthorizedError
from psvault.models.device import Device
from psvault.stores.device_store import DeviceRegistry


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class DeviceRegister(CamelModel):
    device_fingerprint: str = Field(min_length=10, max_length=255)


class DeviceRead(CamelModel):
    id: str
    user_id: str
    device_fingerprint: str
    last_seen_at: datetime
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class DeviceController:

    def __init__(self, devices: DeviceRegistry):
        self._devices = devices

    async def register(self, user_id: str, data: DeviceRegister) -> Device:
        """Upsert por (user, fingerprint): cria ou só atualiza last_seen_at."""
        device = await self._devices.register(user_id, data.device_fingerprint)
        logger.debug(f"📱 Device registrado — id={device.id} user={user_id}")
        return device

    async def list_for_user(self, user_id: str) -> list[Device]:
        return await self._devices.list_by_user(user_id)

    async def delete(self, user_id: str, device_id: str) -> None:
        device = await self._devices.get_by_id(device_id)
        if device is None:
            raise NotFoundError("device", device_id)
        if device.user_id != user_id:
            logger.warning(f"🚫 user={user_id} tentou remover device={device_id}")
            raise UnauthorizedError("device", device_id, user_id)
        if not await self._devices.delete(device_id):
            raise NotFoundError("device", device_id)
