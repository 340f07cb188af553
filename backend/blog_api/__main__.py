"""Run the API with uvicorn: `python -m blog_api`.

Host and port come from `HOST`/`PORT` (see `config.Settings`).
"""

import logging

import uvicorn

from .config import settings
from .main import app, configure_logging

logger = logging.getLogger("blog_api")


def main():
    configure_logging(settings.LOG_LEVEL)
    logger.info("Servidor iniciado na porta %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
