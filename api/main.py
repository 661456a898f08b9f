"""
Sales Dashboard API - Main Application.

FastAPI application serving the sales, inventory, lead and analytics
endpoints under /api/v1. Logging level and allowed CORS origins come from
config.Config.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.models import ErrorResponse
from config import Config

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sales Dashboard API",
    description="Record sales, track inventory at weighted-average cost, follow up leads and repurchases, and read KPIs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """Errors that escape a router are logged and returned as ErrorResponse."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(error="internal_error", detail=str(exc), status_code=500)
    return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Reports the API version and whether Supabase credentials are configured.
    No database round trip is made.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "sales-dashboard-api",
        "database": "configured" if Config.SUPABASE_URL and Config.SUPABASE_KEY else "missing",
    }


@app.get("/", tags=["Root"])
def root():
    return {
        "message": "Sales Dashboard API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": ["/api/v1/sales", "/api/v1/inventory", "/api/v1/leads", "/api/v1/analytics"],
    }


from api.routers import analytics, inventory, leads, sales

app.include_router(sales.router, prefix="/api/v1", tags=["Sales"])
app.include_router(inventory.router, prefix="/api/v1", tags=["Inventory"])
app.include_router(leads.router, prefix="/api/v1", tags=["Leads"])
app.include_router(analytics.router, prefix="/api/v1", tags=["Analytics"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=8000)
