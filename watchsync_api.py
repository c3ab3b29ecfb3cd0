#!/usr/bin/env python3
"""
FastAPI server runner for WatchSync
"""
import uvicorn
import os
from api.main import app

if __name__ == "__main__":
    host = os.getenv("WATCHSYNC_HOST", "0.0.0.0")
    port = int(os.getenv("WATCHSYNC_PORT", "8000"))

    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=True,  # Enable auto-reload for development
        log_level="info"
    )
