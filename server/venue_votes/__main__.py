"""Run the API with uvicorn: ``python -m venue_votes``."""

import uvicorn

from venue_votes.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "venue_votes.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
