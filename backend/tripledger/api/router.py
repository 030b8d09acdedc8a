"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from tripledger.api.routes import balances

api_router = APIRouter()

# Include all route modules
api_router.include_router(balances.router)
