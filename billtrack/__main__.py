import uvicorn

from billtrack.db import initialize_db
from billtrack.logging import configure_logging, reconfigure
from billtrack.settings import settings


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()
    uvicorn.run("web.app:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
