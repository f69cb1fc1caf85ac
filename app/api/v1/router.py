# app/api/v1/router.py
from fastapi import APIRouter

from app.config.settings import settings
from app.api.v1.auth import router as auth_router

from app.modules.users import users_router
from app.modules.clients import clients_router, zones_router, branches_router
from app.modules.products import products_router
from app.modules.sales import sales_router
from app.modules.payments import payments_router
from app.modules.invoices import invoices_router
from app.modules.reports import reports_router

# Router principal: todas las rutas cuelgan de /api
api_router = APIRouter(prefix="/api")

# ==================== AUTENTICACIÓN ====================

api_router.include_router(auth_router, tags=["Autenticación"])

# ==================== MÓDULOS ====================

api_router.include_router(users_router)
api_router.include_router(clients_router)
api_router.include_router(zones_router)
api_router.include_router(branches_router)
api_router.include_router(products_router)
api_router.include_router(sales_router)
api_router.include_router(payments_router)
api_router.include_router(invoices_router)
api_router.include_router(reports_router)

# ==================== ESTADO ====================

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "modules": [
            "auth", "users", "clients", "products", "sales",
            "payments", "invoices", "reports"
        ]
    }
