"""
Stylist Service v3.0.0
Outfit recommendations from garment photos, weather and seasonal trends.

API ROUTES:
-----------
- POST /api/stylist/recommend            - Main recommendation endpoint
- GET  /api/stylist/sessions/{request_id} - Stored recommendation
- GET  /api/health, /metrics              - Health and monitoring
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stylist_service.app.routes import router, VERSION
from stylist_service.config import get_settings, get_provider_status, validate_provider_config
from stylist_service.observability import is_logging_enabled

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info(f"Stylist Service v{VERSION} Starting...")
    logger.info("=" * 50)

    settings = get_settings()
    provider_status = get_provider_status()
    for stage, status in provider_status["stages"].items():
        logger.info(f"Stage {stage}: {status['provider']} ({status['mode']})")

    for warning in validate_provider_config():
        logger.warning(warning)

    logger.info(f"Sessions: {'disk' if settings.session_dir else 'memory'}")
    logger.info(f"Logging: {'enabled' if is_logging_enabled() else 'disabled'}")
    logger.info("✓ Service ready! http://localhost:8000")
    logger.info("✓ Metrics available at /metrics")
    logger.info("=" * 50)

    yield

    logger.info("Service shutting down...")


app = FastAPI(
    title="Stylist Service",
    description="Outfit recommendations from garment photos, weather and trends",
    version=VERSION,
    lifespan=lifespan
)

# ============================================================================
# MIDDLEWARE
# ============================================================================
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(router)
