from fastapi import APIRouter

from record_context.api.routes import callouts, records, utils

api_router = APIRouter()
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
api_router.include_router(callouts.router, prefix="/callouts", tags=["callouts"])
