from pickem.db.session import engine
from pickem.db.base import Base

# registers every model on Base.metadata before create_all
import pickem.models  # noqa: F401


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)
