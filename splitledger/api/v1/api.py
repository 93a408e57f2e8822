from fastapi import APIRouter
from splitledger.api.v1.endpoints import balances, participants, settlements, transactions

api_router = APIRouter()

api_router.include_router(balances.router, tags=["balances"])
api_router.include_router(participants.router, prefix="/participants", tags=["participants"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
