from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from erpforms import __version__
from erpforms.core.config import get_settings
from erpforms.core.errors import ApiError
from erpforms.core.logger import setup_logger
from erpforms.api.routers import stock_corrections, sales_invoices

settings = get_settings()
logger = setup_logger("erpforms")

app = FastAPI(
    title=settings.app_name,
    description="Approval and cancellation workflow for ERP forms",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include routers
app.include_router(stock_corrections.router, prefix="/api")
app.include_router(sales_invoices.router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
