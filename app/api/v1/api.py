from fastapi import APIRouter
from app.api.v1.endpoints import ledgers, items, payments

api_router = APIRouter()

api_router.include_router(ledgers.router, prefix="/ledgers", tags=["ledgers"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
