# Scripts/advance_season.py
# Cron entry point: push the open week of a season as far as it can go.
# Usage:
#   python Scripts/advance_season.py 1
#   python Scripts/advance_season.py 1 --log-level debug

import argparse
import logging
import signal
import threading

from pickem.core.log_config import configure_logging
from pickem.db.session import SessionLocal
from pickem.services.advance_week import advance_season
from pickem.core.errors import PickemError

logger = logging.getLogger("advance_season")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("season_id", type=int, help="Season id (seasons.id)")
    ap.add_argument("--log-level", default=None, help="debug | info | warn | error")
    args = ap.parse_args()

    configure_logging(level=args.log_level)

    cancel = threading.Event()
    # SIGTERM rolls back the running stage instead of leaving it half-written
    signal.signal(signal.SIGTERM, lambda *_: cancel.set())

    db = SessionLocal()
    try:
        res = advance_season(db, args.season_id, cancel=cancel)
    except PickemError as e:
        logger.error("advance failed season_id=%s error=%s", args.season_id, e)
        raise SystemExit(1)
    finally:
        db.close()

    print(f"action={res.action} week_id={res.week_id} status={res.status}")

if __name__ == "__main__":
    main()
