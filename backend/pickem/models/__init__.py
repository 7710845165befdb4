# Import the models here so SQLAlchemy sees them when creating tables
from pickem.models.user import User  # noqa: F401
from pickem.models.teams import Team  # noqa: F401
from pickem.models.season import Season, SeasonParticipant  # noqa: F401
from pickem.models.week import Week, WeekStatus  # noqa: F401
from pickem.models.game import Game  # noqa: F401
from pickem.models.pick import Pick  # noqa: F401
from pickem.models.results import WeekResult, SeasonStanding  # noqa: F401
from pickem.models.settings import GlobalSettings  # noqa: F401
