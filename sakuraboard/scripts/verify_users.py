"""
Re-check every website user against the Discord guild. Run from project root:
  python -m sakuraboard.scripts.verify_users
For a periodic check, e.g. hourly from cron:
  0 * * * * cd /path/to/sakuraboard && .venv/bin/python -m sakuraboard.scripts.verify_users
"""
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from sakuraboard.core.config import get_access_config, get_settings
from sakuraboard.core.database import SessionLocal
from sakuraboard.services.discord_client import DiscordClient
from sakuraboard.services.user_verification import verify_all_users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run verify-all once; exit code 1 if any lookup failed."""
    config = get_access_config()
    discord = DiscordClient.from_settings(get_settings(), config)
    db = SessionLocal()
    try:
        summary = asyncio.run(verify_all_users(db, discord, config))
        print(
            f"Checked {summary.checked} users: "
            f"{summary.updated} updated, {summary.errors} errors."
        )
        return 1 if summary.errors else 0
    except Exception as e:
        logger.exception("User verification job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
