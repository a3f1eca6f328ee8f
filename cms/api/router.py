from __future__ import annotations

from fastapi import APIRouter

from cms.api.routes import auth, customers, employees

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
