"""
Alipay Mobile Backend - FastAPI Application

Serves signed order strings to the mobile app, proxies order queries to the
gateway and receives the gateway's asynchronous payment notifications.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from .config import settings
from .exceptions import AlipayError
from .api.orders import router as orders_router
from .api.notify import router as notify_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

__version__ = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    The gateway client itself is built lazily on first request, so a missing
    key surfaces as an error response rather than a failed startup.
    """
    logger.info("Starting Alipay mobile backend...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Gateway: {settings.gateway}")

    yield

    logger.info("Shutting down Alipay mobile backend...")


# Initialize FastAPI application
app = FastAPI(
    title="Alipay Mobile API",
    description="Signed order strings, order queries and payment notifications for Alipay app payments",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(AlipayError)
async def alipay_error_handler(request: Request, exc: AlipayError):
    """
    Handle adapter errors raised outside the client facade (key loading).

    Returns 400 Bad Request with error details from AlipayError.to_dict().
    """
    logger.warning(
        f"Alipay error: {exc.error_code} - {exc.message}",
        extra={"details": exc.details}
    )

    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unexpected errors.

    Logs full exception for debugging but returns generic message to client.
    """
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error_code": "internal_error",
            "message": "An unexpected error occurred",
            "details": {"error_type": type(exc).__name__} if settings.environment == "sandbox" else {}
        },
    )


# Health check endpoint
@app.get("/api/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        Server status and version information
    """
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.environment,
        "gateway": settings.gateway,
    }


# Include API routers
app.include_router(orders_router, prefix="/api/alipay", tags=["Orders"])
app.include_router(notify_router, prefix="/api/alipay", tags=["Notifications"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "alipay_mobile.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "sandbox",
        log_level=settings.log_level.lower()
    )
