"""Run the API with uvicorn: ``python -m scratch_alerts``."""

import uvicorn

from scratch_alerts.core.config import settings

if __name__ == "__main__":
    uvicorn.run("scratch_alerts.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
