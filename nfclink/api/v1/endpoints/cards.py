# nfclink/api/v1/endpoints/cards.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nfclink.api.deps import get_client_info, get_db
from nfclink.models.card import Card
from nfclink.models.user import User
from nfclink.schemas.card import CardCreate, CardDelete, CardResponse
from nfclink.schemas.common import SuccessResponse
from nfclink.services import audit
from nfclink.services.context import ClientInfo

router = APIRouter()


# 1. LIST CARDS (GET), optionally for one owner
@router.get("", response_model=List[CardResponse])
async def read_cards(
    user_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Card).options(selectinload(Card.user))
    if user_id is not None:
        query = query.where(Card.user_id == user_id)

    result = await db.execute(query.order_by(Card.id.desc()))
    return result.scalars().all()


# 2. WRITE A TAG (POST)
@router.post("", response_model=List[CardResponse], status_code=status.HTTP_201_CREATED)
async def create_card(
    card_in: CardCreate,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    owner = await db.get(User, card_in.user_id)
    if not owner:
        raise HTTPException(status_code=404, detail="User not found")

    new_card = Card(**card_in.model_dump())
    new_card.user = owner
    db.add(new_card)
    await db.commit()

    await audit.record_audit(
        db,
        action="card_created",
        entity="cards",
        entity_id=new_card.id,
        user_id=owner.id,
        details={"uid": new_card.uid, "link": new_card.link},
        client=client,
    )
    return [new_card]


# 3. REMOVE A CARD (DELETE)
@router.delete("", response_model=SuccessResponse)
async def delete_card(
    card_in: CardDelete,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    card = await db.get(Card, card_in.id)
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")

    owner_id = card.user_id
    await db.delete(card)
    await db.commit()

    await audit.record_audit(
        db,
        action="card_deleted",
        entity="cards",
        entity_id=card_in.id,
        user_id=owner_id,
        client=client,
    )
    return SuccessResponse()
