"""
Chainup verifier - FastAPI application

Run: uvicorn main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from infrastructure import error_tracker, get_config, register_exception_handlers, utc_timestamp
from api.verification_router import router as verification_router
from services.contract_verification import close_verification_service
from services.dependency_registry import get_registry
from sentry_config import init_sentry

config = get_config()

logging.basicConfig(
    level=getattr(logging, config.monitoring.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("chainup")

init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Chainup verifier starting ({config.environment.value}, explorer={config.explorer.base_url})")
    yield
    await close_verification_service()
    logger.info("Chainup verifier stopped")


app = FastAPI(
    title="Chainup Verifier",
    description="Flatten Solidity sources and verify them on a Blockscout explorer",
    version="1.0.0",
    debug=config.debug,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(verification_router)


@app.get("/health")
async def health():
    registry = get_registry()
    return {
        "status": "ok",
        "service": "chainup-verifier",
        "environment": config.environment.value,
        "explorer": config.explorer.base_url,
        "config": config.to_dict(),
        "dependency_registry": {"name": registry.name, "version": registry.version, "entries": len(registry)},
        "errors": error_tracker.get_stats(),
        "timestamp": utc_timestamp(),
    }
