#!/usr/bin/env python3
"""
Run script for the Scribe transcription backend
"""
import uvicorn

from scribe.config.settings import settings
from scribe.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
