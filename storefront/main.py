"""
Storefront BFF Application

Backend-for-frontend over the commerce platform: catalog reads,
cart mutations, shipping method selection and normalized totals.
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commerce import ApiError, CommerceError, NotFoundError, ValidationError

from .core.clients import close_commerce_client
from .core.config import settings
from .routes import admin_router, cart_router, products_router

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront BFF starting up...")
    logger.info(f"Commerce API: {settings.ct_api_url} (project {settings.ct_project_key})")
    if not settings.commerce_configured:
        logger.warning("Commerce credentials are not configured - API calls will fail")

    yield

    logger.info("Storefront BFF shutting down...")
    await close_commerce_client()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Storefront backend-for-frontend over the commerce platform",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[settings.cart_header_name],
)


def error_status(error: CommerceError) -> int:
    """HTTP status for a commerce error"""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ApiError) and 400 <= error.status < 500 and error.status not in (401, 403):
        return error.status
    return 500


@app.exception_handler(CommerceError)
async def commerce_error_handler(request: Request, exc: CommerceError):
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} raised {type(exc).__name__}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(admin_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": "storefront-bff",
        "commerce_configured": settings.commerce_configured,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
