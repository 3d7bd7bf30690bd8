"""Run the quote server: ``python -m cotacao``."""

import uvicorn

from cotacao.core.config import get_settings
from cotacao.main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
