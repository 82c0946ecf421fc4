from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
import logging

from core.config import settings
from core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from core.exceptions import BaseCustomException
from core.response import error_response
from database.connection import create_tables
from routers import auth, product, product_public, order, rating, product_view, analytics, settings as settings_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Storefront Backend API",
    description="Seller dashboard and landing-page storefront API",
    version="1.0.0",
    debug=settings.DEBUG
)

# Global exception handler for custom exceptions
@app.exception_handler(BaseCustomException)
async def custom_exception_handler(request: Request, exc: BaseCustomException):
    """Handle custom exceptions with standardized response format."""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(f"Custom exception [{request_id}] on {request.method} {request.url}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=exc.message,
            error_code=exc.__class__.__name__,
            details=exc.details
        )
    )

# Global exception handler for validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed error messages."""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(f"Validation error [{request_id}] on {request.method} {request.url}: {exc}")

    error_details = []
    for error in exc.errors():
        field = '.'.join(str(x) for x in error['loc'])
        error_details.append({
            "field": field,
            "message": error['msg'],
            "type": error['type']
        })

    return JSONResponse(
        status_code=422,
        content=error_response(
            message="Request validation failed",
            error_code="VALIDATION_ERROR",
            details={"errors": error_details}
        )
    )

# Global exception handler for general HTTP exceptions
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with logging."""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(f"HTTP exception [{request_id}] on {request.method} {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=str(exc.detail) if isinstance(exc.detail, str) else "HTTP error occurred",
            error_code="HTTP_ERROR",
            details={"status_code": exc.status_code, "detail": exc.detail}
        )
    )

# Database failures that escaped a service are reported without their detail
@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(f"Database error [{request_id}] on {request.method} {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=500,
        content=error_response(
            message="Internal Server Error",
            error_code="UpstreamError",
            details={"request_id": request_id}
        )
    )

# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(f"Unexpected error [{request_id}] on {request.method} {request.url}: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=error_response(
            message="An unexpected error occurred. Please try again.",
            error_code="INTERNAL_SERVER_ERROR",
            details={"request_id": request_id}
        )
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
)

# Order matters: the last one added runs first
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

@app.get("/api/health")
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "message": "Backend is running"}

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(product.router, prefix="/api/products", tags=["Products"])
app.include_router(product_public.router, prefix="/api", tags=["Public Products"])
app.include_router(order.router, prefix="/api/orders", tags=["Orders"])
app.include_router(rating.router, prefix="/api/ratings", tags=["Ratings"])
app.include_router(product_view.router, prefix="/api/product-views", tags=["Product Views"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(settings_router.router, prefix="/api/settings", tags=["Settings"])

# Create database tables on startup
@app.on_event("startup")
async def startup_event():
    """Initialize the application on startup."""
    logger.info("Starting up Storefront Backend API...")
    create_tables()
    logger.info("Database tables created successfully")

@app.get("/")
def root():
    """Root endpoint for API health check."""
    return {
        "message": "Welcome to Storefront Backend API",
        "status": "healthy",
        "version": "1.0.0"
    }
