from pickem.db.session import SessionLocal
from pickem.db.init_db import init_db
from pickem.models.teams import Team

# (abbreviation, name, city)
NFL_TEAMS = [
    ("ARI", "Cardinals", "Arizona"),
    ("ATL", "Falcons", "Atlanta"),
    ("BAL", "Ravens", "Baltimore"),
    ("BUF", "Bills", "Buffalo"),
    ("CAR", "Panthers", "Carolina"),
    ("CHI", "Bears", "Chicago"),
    ("CIN", "Bengals", "Cincinnati"),
    ("CLE", "Browns", "Cleveland"),
    ("DAL", "Cowboys", "Dallas"),
    ("DEN", "Broncos", "Denver"),
    ("DET", "Lions", "Detroit"),
    ("GB", "Packers", "Green Bay"),
    ("HOU", "Texans", "Houston"),
    ("IND", "Colts", "Indianapolis"),
    ("JAX", "Jaguars", "Jacksonville"),
    ("KC", "Chiefs", "Kansas City"),
    ("LV", "Raiders", "Las Vegas"),
    ("LAC", "Chargers", "Los Angeles"),
    ("LAR", "Rams", "Los Angeles"),
    ("MIA", "Dolphins", "Miami"),
    ("MIN", "Vikings", "Minnesota"),
    ("NE", "Patriots", "New England"),
    ("NO", "Saints", "New Orleans"),
    ("NYG", "Giants", "New York"),
    ("NYJ", "Jets", "New York"),
    ("PHI", "Eagles", "Philadelphia"),
    ("PIT", "Steelers", "Pittsburgh"),
    ("SF", "49ers", "San Francisco"),
    ("SEA", "Seahawks", "Seattle"),
    ("TB", "Buccaneers", "Tampa Bay"),
    ("TEN", "Titans", "Tennessee"),
    ("WSH", "Commanders", "Washington"),
]


def run():
    init_db()
    db = SessionLocal()

    # abbreviations are unique, so a second run only reports
    existing = db.query(Team).count()
    if existing > 0:
        print(f"Teams already seeded. ({existing} rows)")
        db.close()
        return

    items = [Team(abbreviation=abbr, name=name, city=city, is_active=True) for abbr, name, city in NFL_TEAMS]

    db.add_all(items)
    db.commit()
    db.close()
    print(f"Seed TEAMS OK ({len(items)} teams)")


if __name__ == "__main__":
    run()
