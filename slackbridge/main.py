"""
Slackbridge API

Exposes the Slack -> Matrix message parser over HTTP.
"""

import logging
from fastapi import FastAPI
from slackbridge.config import get_settings
from slackbridge.api.routes import slack

settings = get_settings()
log_level = logging.DEBUG if settings.debug else logging.INFO

logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("slackbridge").setLevel(log_level)

# httpx logs every snippet download at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

app = FastAPI(
    title=settings.app_name,
    description="Converts Slack messages into Matrix event content",
    version="0.1.0",
)

app.include_router(slack.router, prefix="/api/slack", tags=["Slack"])


@app.get("/")
async def root():
    return {
        "message": f"{settings.app_name} - Slack to Matrix message conversion",
        "version": "0.1.0",
        "endpoints": {
            "parse": "/api/slack/parse",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.app_name}
