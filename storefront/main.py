from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from contextlib import asynccontextmanager
from typing import Optional
import logging

from storefront.config import Settings, settings as default_settings
from storefront.db.database import ConnectionProvider, build_engine, init_db
from storefront.auth.jwt_validator import JWTValidator
from storefront.stores import CategoryStore, ProductStore
from storefront.api import categories, health, products

# Configure logging
logging.basicConfig(
    level=default_settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Catalog Service...")
    await init_db(app.state.provider)
    logger.info("Catalog Service started successfully")
    yield
    # Shutdown
    logger.info("Shutting down Catalog Service...")
    app.state.provider.dispose()


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[ConnectionProvider] = None,
    category_store: Optional[CategoryStore] = None,
    product_store: Optional[ProductStore] = None,
) -> FastAPI:
    """Build the application with explicitly constructed stores"""
    settings = settings or default_settings
    provider = provider or ConnectionProvider(build_engine(settings))

    app = FastAPI(
        title="Catalog Service",
        description="""
        Category and product catalog for the storefront.

        **Features:**
        - Category and product CRUD (admins)
        - Product search by category, price range, color and name (public)

        **Authentication:**
        Write endpoints require a JWT bearer token carrying the admin role:
        ```
        Authorization: Bearer <your-jwt-token>
        ```
        """,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.state.settings = settings
    app.state.provider = provider
    app.state.jwt_validator = JWTValidator(settings)
    app.state.category_store = category_store or CategoryStore(provider)
    app.state.product_store = product_store or ProductStore(provider)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
        max_age=3600,
    )

    def custom_openapi():
        """Custom OpenAPI schema with JWT Bearer authentication"""
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "JWT carrying the admin role. Format: Bearer <token>"
            }
        }
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    # Global exception handler for unhandled exceptions
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch all unhandled exceptions and log them properly"""
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
            }
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error_type": type(exc).__name__
            }
        )

    # Validation error handler
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors"""
        logger.warning(
            f"Validation error: {exc.errors()}",
            extra={
                "path": request.url.path,
                "method": request.method,
            }
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors(), custom_encoder={Exception: str})}
        )

    # Include routers
    app.include_router(health.router)
    app.include_router(categories.router)
    app.include_router(products.router)

    @app.get("/")
    def root():
        return {"service": settings.app_name, "version": settings.app_version}

    return app


app = create_app()
