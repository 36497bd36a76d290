"""Run the relay with uvicorn: ``python -m app``."""

import uvicorn

from app.config import get_settings


def main() -> None:
    settings = get_settings()
    # log_config=None keeps the handlers installed by setup_logging
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
