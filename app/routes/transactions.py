from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from sqlmodel import Session
from app.database import get_session
from app.schemas.transaction_schemas import TransactionRead, TransactionStatistics
from app.services import transaction_service
from app.utils.token import get_current_user_id

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: Dict[str, Any] = Body(default={}),
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id),
):
    order = transaction_service.place_order(session, current_user_id, payload.get("items"))

    return {
        "status": True,
        "message": "Transaction created successfully",
        "data": TransactionRead.model_validate(order),
    }


@router.get("")
def list_transactions(session: Session = Depends(get_session)):
    orders = transaction_service.list_transactions(session)
    return {"status": True, "data": [TransactionRead.model_validate(o) for o in orders]}


# registered before /{transaction_id} so "statistics" is not taken for an id
@router.get("/statistics/all")
def transaction_statistics(session: Session = Depends(get_session)):
    stats = transaction_service.get_statistics(session)
    return {"status": True, "data": TransactionStatistics(**stats)}


@router.get("/{transaction_id}")
def get_transaction(transaction_id: str, session: Session = Depends(get_session)):
    order = transaction_service.get_transaction(session, transaction_id)
    return {"status": True, "data": TransactionRead.model_validate(order)}
