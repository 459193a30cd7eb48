"""
psvault/routes/device_routes.py — Dispositivos do usuário.
"""
from fastapi import APIRouter, Depends, Response, status

from psvault.controllers.device_controller import DeviceController, DeviceRead, DeviceRegister
from psvault.middlewares.auth import require_user
from psvault.routes.deps import device_controller

router = APIRouter(prefix="/api/devices", tags=["Devices"])


@router.post("", response_model=DeviceRead, status_code=status.HTTP_201_CREATED,
             summary="Registrar device")
async def register_device(
    body: DeviceRegister,
    user_id: str = Depends(require_user),
    controller: DeviceController = Depends(device_controller),
):
    """Idempotente: o mesmo fingerprint só atualiza `lastSeenAt`."""
    return await controller.register(user_id, body)


@router.get("", response_model=list[DeviceRead], summary="Listar devices")
async def list_devices(
    user_id: str = Depends(require_user),
    controller: DeviceController = Depends(device_controller),
):
    return await controller.list_for_user(user_id)


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
               summary="Remover device")
async def delete_device(
    device_id: str,
    user_id: str = Depends(require_user),
    controller: DeviceController = Depends(device_controller),
):
    await controller.delete(user_id, device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
