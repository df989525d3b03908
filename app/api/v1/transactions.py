import logging
from fastapi import APIRouter, HTTPException, status
from app.core.exceptions import RestaurantServiceError
from app.models.transaction import Transaction
from app.schemas.response import SuccessResponse
from app.schemas.transaction import TransactionItemResponse, TransactionRequest, TransactionResponse
from app.services.transaction_service import (
    create_transaction,
    delete_transaction,
    get_transaction_by_id,
    list_transactions,
)

router = APIRouter()
log = logging.getLogger("uvicorn")


def _transaction_detail(transaction: Transaction) -> dict:
    return TransactionResponse(
        id=transaction.id,
        restaurant_id=transaction.restaurant_id,
        user_id=transaction.user_id,
        order_id=transaction.order_id,
        table_number=transaction.table_number,
        items=[
            TransactionItemResponse(
                item_id=i.menu_item_id, item_name=i.item_name, quantity=i.quantity, price=i.price
            )
            for i in transaction.items
        ],
        tax=transaction.tax,
        discount=transaction.discount,
        sub_total=transaction.sub_total,
        total=transaction.total,
        payment_type=transaction.payment_type,
        created_at=str(transaction.created_at),
    ).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_transaction_endpoint(request_data: TransactionRequest):
    """
    Records a point-of-sale transaction. Stock for every item is reconciled
    first; on a shortfall or unknown item nothing is written.
    """
    try:
        transaction = await create_transaction(
            restaurant_id=request_data.restaurant_id,
            user_id=request_data.user_id,
            items=request_data.items,
            tax=request_data.tax,
            discount=request_data.discount,
            payment_type=request_data.type,
            table_number=request_data.table_number,
        )
    except RestaurantServiceError as e:
        log.error(f"Error creating transaction: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

    log.info(f"Transaction {transaction.id} created successfully.")
    return SuccessResponse(data=_transaction_detail(transaction))


@router.get("/", response_model=SuccessResponse)
async def list_transactions_endpoint(restaurant_id: str):
    transactions = await list_transactions(restaurant_id)
    return SuccessResponse(data=[_transaction_detail(t) for t in transactions])


@router.get("/{transaction_id}", response_model=SuccessResponse)
async def get_transaction_endpoint(transaction_id: int):
    transaction = await get_transaction_by_id(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return SuccessResponse(data=_transaction_detail(transaction))


@router.delete("/{transaction_id}", response_model=SuccessResponse)
async def delete_transaction_endpoint(transaction_id: int):
    """Deletes the record; stock is not restored."""
    try:
        await delete_transaction(transaction_id)
    except RestaurantServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return SuccessResponse(data={"message": "Transaction deleted successfully"})
