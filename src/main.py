#!/usr/bin/env python3
"""
Lead Scraper API.

Discovers businesses through Google Places (falling back to Apollo), enriches
them with provider data and cross-checks the result with two AI analyzers.
"""

import os

from dotenv import load_dotenv
from fastapi import FastAPI

from common.logging import get_logger, intercept_stdlib_logging
from routes import discovery, enrichment, health, leads, providers

load_dotenv()
intercept_stdlib_logging("uvicorn", "uvicorn.error", "uvicorn.access", "httpx")

logger = get_logger(__name__)

ROUTERS = (health, discovery, enrichment, providers, leads)


def create_app() -> FastAPI:
    application = FastAPI(
        title="Lead Scraper API",
        description="Multi-source business lead discovery and enrichment",
        version="0.1.0",
    )
    for module in ROUTERS:
        application.include_router(module.router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 5000))
    logger.info(f"Starting Lead Scraper API on port {port}")
    uvicorn.run("main:app", host="0.0.0.0", port=port, log_level="info")
