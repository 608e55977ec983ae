import asyncio
import logging
import os

from dotenv import load_dotenv

from core.database import init_db
from worker.reminders import run_once

# Load `.env` for local/dev runs (override=True so updates take effect after restart).
load_dotenv(override=True)

# -------- CONFIG --------
REMINDER_INTERVAL = int(os.getenv("REMINDER_INTERVAL_SECONDS", str(7 * 24 * 60 * 60)))
# A single pass and exit; handy with an external scheduler or for local checks.
TEST_MODE = os.getenv("TEST_MODE", "false").lower() == "true"
# ------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("worker")


async def main():
    init_db()

    while True:
        try:
            run_once()
        except Exception as e:
            log.exception("Error during run", extra={"error": str(e)})

        if TEST_MODE:
            break

        log.info("Sleeping", extra={"seconds": REMINDER_INTERVAL})
        await asyncio.sleep(REMINDER_INTERVAL)


if __name__ == "__main__":
    asyncio.run(main())
