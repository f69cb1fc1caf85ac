import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import settings
from app.config.database import init_db
from app.core.logging import setup_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import setup_exception_handlers
from app.shared.services.mailer import EmailServiceConfig
from app.api.v1.router import api_router

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{settings.app_name} iniciando - versión {settings.version}")
    logger.info(f"Entorno: {'Development' if settings.debug else 'Production'}")
    logger.info(f"JWT {settings.algorithm}, expira en {settings.access_token_expire_minutes} minutos")
    if settings.auto_create_tables:
        init_db()
        logger.info("Tablas verificadas")
    for error in EmailServiceConfig().validate():
        logger.warning(f"Configuración SMTP inválida: {error}")

    yield

    # Shutdown
    logger.info(f"{settings.app_name} detenido")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Sistema de caja: ventas, cobros y comprobantes electrónicos",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware and error handlers
setup_middleware(app)
setup_exception_handlers(app)

# Include routers
app.include_router(api_router)

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": f"{settings.app_name} funcionando",
        "version": settings.version,
        "status": "running",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "api": "/api"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
