"""Development entry point: ``python -m chefbot``."""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "chefbot.app:app",
        host=os.getenv("CHEFBOT_HOST", "0.0.0.0"),
        port=int(os.getenv("CHEFBOT_PORT", "5000")),
    )


if __name__ == "__main__":
    main()
