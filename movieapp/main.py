from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from dotenv import load_dotenv
from movieapp.routes import auth, movies, comments
from movieapp.middleware.security import SecurityHeadersMiddleware
from movieapp.migrations.create_all_tables import create_tables
from movieapp.services.tmdb_client import tmdb_client
import os
import logging

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


# ============================================
# Application Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events

    Startup:
    - Log configuration summary
    - Create missing tables (AUTO_CREATE_TABLES, on by default)

    Shutdown:
    - Close the pooled TMDB HTTP session
    """
    logger.info("=" * 60)
    logger.info("MovieApp API Starting...")
    logger.info(f"   Environment: {ENVIRONMENT}")
    logger.info(f"   CORS Origins: {len(allowed_origins)} configured")
    logger.info(f"   TMDB auth: {'bearer token' if tmdb_client.access_token else 'api key' if tmdb_client.api_key else 'NOT CONFIGURED'}")
    logger.info("=" * 60)

    if os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true":
        create_tables()

    yield

    logger.info("=" * 60)
    logger.info("MovieApp API Shutting Down...")
    tmdb_client.close()
    logger.info("   TMDB session closed")
    logger.info("=" * 60)


app = FastAPI(
    title="MovieApp API",
    description="Movie browsing API with TMDB integration, comments and JWT authentication",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ============================================
# Security Configuration
# ============================================

# CORS - Whitelist allowed origins
allowed_origins = [
    "http://localhost:3000",
]
if production_url := os.getenv("FRONTEND_URL"):
    allowed_origins.append(production_url)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=CORS_METHODS,
    allow_headers=["*"],
    expose_headers=["Token-Expired", "Location"],
)

app.add_middleware(SecurityHeadersMiddleware, enable_hsts=ENVIRONMENT == "production")

# Trusted Hosts - Production only
if ENVIRONMENT == "production":
    if trusted_hosts := [h.strip() for h in os.getenv("TRUSTED_HOSTS", "").split(",") if h.strip()]:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)


# ============================================
# Exception Handlers - keep CORS headers on every error response
# ============================================

def _with_cors(request: Request, response: JSONResponse) -> JSONResponse:
    origin = request.headers.get("origin")
    if origin in allowed_origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = ", ".join(CORS_METHODS)
        response.headers["Access-Control-Allow-Headers"] = "*"
        response.headers["Access-Control-Expose-Headers"] = "Token-Expired, Location"
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Error responses must stay readable by the browser client,
    in particular 401s carrying the Token-Expired header
    """
    response = JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )
    return _with_cors(request, response)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected errors"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    response = JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
    return _with_cors(request, response)


# ============================================
# Routes
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """Basic health check"""
    return {
        "message": "MovieApp API",
        "version": API_VERSION,
        "status": "healthy",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check for monitoring"""
    return {
        "status": "healthy",
        "api_version": API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "tmdb": {
            "configured": bool(tmdb_client.access_token or tmdb_client.api_key),
            "circuit_open": tmdb_client.breaker.is_open,
        },
    }


app.include_router(auth.router)
app.include_router(movies.router)
app.include_router(comments.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        log_level="info"
    )
