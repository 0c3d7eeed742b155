"""Run the API with uvicorn on the configured host/port: python -m taskboard"""

import uvicorn

from taskboard.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("taskboard.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
