"""Run the service with uvicorn: ``python -m renderscrape``."""

import uvicorn

from renderscrape.config import config


def main() -> None:
    uvicorn.run("renderscrape.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
