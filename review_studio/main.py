# review_studio/main.py - REVIEW ARTICLE API
# Handles: product URL -> localized review article with SEO, schema and images

import os
import logging
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from review_studio.config import PORT, SERVICE_VERSION
from review_studio.models import HealthResponse
from review_studio.routers import generate_router
from review_studio.services.dictionary import shared_dictionary

# Create FastAPI app
app = FastAPI(
    title="Review Studio",
    description="Product URL to localized review article",
    version=SERVICE_VERSION
)

# CORS middleware - ALLOW ALL
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(generate_router)


# ============================================================
# HEALTH CHECK
# ============================================================

@app.get("/healthz", response_model=HealthResponse)
async def healthz():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        version=SERVICE_VERSION,
        openai_configured=bool(os.getenv("OPENAI_API_KEY")),
        image_service_configured=bool(os.getenv("NANO_BANANA_API_KEY")),
        dictionary_loaded=shared_dictionary.loaded,
    )


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies"""
    logger.warning(f"Invalid request body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body.",
            "details": jsonable_encoder(exc.errors()),
        }
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, keeping headers such as Allow on 405"""
    logger.error(f"HTTP {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
