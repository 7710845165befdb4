from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from pickem.models.settings import GlobalSettings

NO_CUTOFF = -1  # pick_cutoff_minutes value that turns the cutoff off (testing)


@dataclass(frozen=True)
class LeagueSettings:
    """Read-only snapshot of the league rules, taken once per operation."""

    pick_cutoff_minutes: int = 120
    allow_pick_edits: bool = True
    points_per_correct_pick: int = 1
    competition_timezone: str = "UTC"
    allow_commissioner_overrides: bool = False
    allow_picks_after_kickoff: bool = False
    debug_mode: bool = False

    @property
    def cutoff_enabled(self) -> bool:
        return self.pick_cutoff_minutes != NO_CUTOFF


def get_or_create_global_settings(db: Session) -> GlobalSettings:
    row = db.query(GlobalSettings).order_by(GlobalSettings.id.asc()).first()
    if not row:
        row = GlobalSettings()
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def load_league_settings(db: Session) -> LeagueSettings:
    row = db.query(GlobalSettings).order_by(GlobalSettings.id.asc()).first()
    if row is None:
        return LeagueSettings()

    return LeagueSettings(
        pick_cutoff_minutes=int(row.pick_cutoff_minutes),
        allow_pick_edits=bool(row.allow_pick_edits),
        points_per_correct_pick=int(row.points_per_correct_pick),
        competition_timezone=row.competition_timezone,
        allow_commissioner_overrides=bool(row.allow_commissioner_overrides),
        allow_picks_after_kickoff=bool(row.allow_picks_after_kickoff),
        debug_mode=bool(row.debug_mode),
    )
