from __future__ import annotations

from core.config import settings
from core.logging import configure_logging
from infra.api.app import create_app


configure_logging(settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("infra.api.main:app", host=settings.api_host, port=settings.api_port)
