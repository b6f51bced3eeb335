"""
Run the API server:
  python -m catalog
Binds to HOST:PORT from settings. Apply migrations first with `alembic upgrade head`.
"""

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from catalog.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "catalog.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.APP_ENV == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
