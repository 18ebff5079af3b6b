"""
Seven Tattoo Intake API
FastAPI application that relays storefront form submissions to the studio inbox.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from intake.config import get_config
from intake.routers import submissions

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

config = get_config()

app = FastAPI(
    title="Seven Tattoo Intake API",
    description="Application and booking form intake with email relay",
    version=config.version,
)

# CORS: storefront origins plus CORS_ORIGINS, resolved at startup
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(submissions.router, prefix="/api/forms", tags=["forms"])


@app.get("/")
async def root():
    return {"message": "Seven Tattoo Intake API", "version": config.version}


@app.get("/health")
async def health():
    return {"status": "ok", "mail_provider": config.mail_provider}
