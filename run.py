"""
Run the Slackbridge API with uvicorn.

Usage:
    python run.py

Server options come from the environment or .env:
    HOST / PORT - bind address (default 127.0.0.1:8000)
    DEBUG=true  - debug logging and auto-reload
"""

import uvicorn
from slackbridge.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    log_level = "debug" if settings.debug else "info"

    print(f"Starting {settings.app_name} on {settings.host}:{settings.port} (log level: {log_level})")
    print(f"Parse endpoint: http://{settings.host}:{settings.port}/api/slack/parse")

    uvicorn.run(
        "slackbridge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=log_level,
    )
