"""Food Order API - FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.errors import InvalidCombinationError, NotFoundError, StoreError, ValidationError

from .config import get_settings
from .routes import admin, feed, menu, orders, summary

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(
    title="Food Order API",
    description="Daily food orders with live updates for every connected viewer",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    code = "invalid_combination" if isinstance(exc, InvalidCombinationError) else "validation_error"
    return JSONResponse(status_code=422, content={"detail": str(exc), "code": code})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc), "code": "not_found"})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    log.error(f"[API] Store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc), "code": "store_error"})


# Include routers (fixed paths before /api/orders/{order_id})
app.include_router(summary.router)
app.include_router(feed.router)
app.include_router(orders.router)
app.include_router(menu.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "food-order-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.order_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
