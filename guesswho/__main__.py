import logging
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    # Config reads the environment at import time, so load .env first.
    load_dotenv(Path.cwd() / ".env")

    from guesswho.app import create_app
    from guesswho.config import Config

    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger("guesswho")
    logger.info("Server listening on %s:%s", Config.HOST, Config.PORT)

    uvicorn.run(create_app(Config), host=Config.HOST, port=Config.PORT, log_level=Config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
