from pickem.db.session import SessionLocal
from pickem.db.init_db import init_db
from pickem.services.league_settings import get_or_create_global_settings


def run():
    init_db()
    db = SessionLocal()
    row = get_or_create_global_settings(db)
    print(
        f"Settings OK: cutoff={row.pick_cutoff_minutes}min "
        f"points={row.points_per_correct_pick} tz={row.competition_timezone}"
    )
    db.close()


if __name__ == "__main__":
    run()
