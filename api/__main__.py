"""Run the API with uvicorn: ``python -m api``."""
from __future__ import annotations

import uvicorn

from api.app import create_app
from api.core.config import get_settings
from api.core.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
