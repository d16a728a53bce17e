"""Run the API server: ``python -m tasktracker``."""

import uvicorn

from tasktracker.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("tasktracker.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
