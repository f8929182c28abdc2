# nfclink/api/v1/endpoints/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.api.deps import get_client_info, get_db
from nfclink.models.user import User
from nfclink.schemas.user import UserCreate, UserListItem, UserPublic
from nfclink.security import hashing
from nfclink.services import audit
from nfclink.services.context import ClientInfo

router = APIRouter()


@router.post("", response_model=List[UserPublic], status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    result = await db.execute(select(User).where(User.email == user_in.email))
    if result.scalars().first():
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = User(
        name=user_in.name,
        email=user_in.email,
        password_hash=hashing.get_password_hash(user_in.password),
    )
    db.add(new_user)
    await db.commit()

    await audit.record_audit(
        db,
        action="register",
        entity="users",
        entity_id=new_user.id,
        user_id=new_user.id,
        client=client,
    )
    return [new_user]


@router.get("", response_model=List[UserListItem])
async def list_users(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).order_by(User.id))
    return result.scalars().all()
