# nfclink/api/v1/endpoints/trusted_devices.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.api.deps import get_client_info, get_db
from nfclink.models.user import User
from nfclink.schemas.common import SuccessResponse
from nfclink.schemas.trusted_device import (
    TrustedDeviceCreate,
    TrustedDeviceCreated,
    TrustedDeviceList,
    TrustedDeviceValidate,
    TrustedDeviceValidation,
)
from nfclink.services import audit, trusted_devices
from nfclink.services.context import ClientInfo

router = APIRouter()


@router.post("", response_model=TrustedDeviceCreated)
async def add_trusted_device(
    request: TrustedDeviceCreate,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    if not await db.get(User, request.user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    device = await trusted_devices.register_device(
        db,
        request.user_id,
        client,
        device_name=request.device_name,
        remember_days=request.remember_days,
    )

    await audit.record_audit(
        db,
        action="add_trusted_device",
        entity="trusted_devices",
        entity_id=device.device_id,
        user_id=request.user_id,
        details={"device_name": device.device_name, "device_id": device.device_id},
        client=client,
    )
    return TrustedDeviceCreated(device_id=device.device_id)


@router.get("", response_model=TrustedDeviceList)
async def read_trusted_devices(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    devices = await trusted_devices.list_devices(db, user_id)
    return {"devices": devices}


@router.put("", response_model=TrustedDeviceValidation)
async def validate_trusted_device(
    request: TrustedDeviceValidate,
    db: AsyncSession = Depends(get_db),
):
    valid = await trusted_devices.validate_device(db, request.user_id, request.device_id)
    return TrustedDeviceValidation(valid=valid)


@router.delete("", response_model=SuccessResponse)
async def remove_trusted_device(
    user_id: int = Query(..., alias="userId"),
    device_id: str = Query(..., alias="deviceId", min_length=1, max_length=64),
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    if not await trusted_devices.remove_device(db, user_id, device_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Device not found")

    await audit.record_audit(
        db,
        action="remove_trusted_device",
        entity="trusted_devices",
        entity_id=device_id,
        user_id=user_id,
        client=client,
    )
    return SuccessResponse()
