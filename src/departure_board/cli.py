from __future__ import annotations

import logging

from dotenv import load_dotenv

from .app import build_application
from .config import BotSettings


def main() -> None:
    """Entry point for launching the Telegram bot."""

    load_dotenv()
    settings = BotSettings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    application = build_application(settings)
    application.run_polling()


if __name__ == "__main__":  # pragma: no cover
    main()
