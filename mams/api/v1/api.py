# File: mams/api/v1/api.py
from fastapi import APIRouter
from mams.api.v1.endpoints import auth, bases, users, assets, personnel, inventory, purchases, transfers, assignments

# Create main API router
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    bases.router,
    prefix="/bases",
    tags=["bases"]
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"]
)

api_router.include_router(
    assets.router,
    prefix="/assets",
    tags=["assets"]
)

api_router.include_router(
    personnel.router,
    prefix="/personnel",
    tags=["personnel"]
)

api_router.include_router(
    inventory.router,
    prefix="/inventory",
    tags=["inventory"]
)

api_router.include_router(
    purchases.router,
    prefix="/purchases",
    tags=["purchases"]
)

api_router.include_router(
    transfers.router,
    prefix="/transfers",
    tags=["transfers"]
)

api_router.include_router(
    assignments.router,
    prefix="/assignments",
    tags=["assignments"]
)
