"""Query sessions."""

from iquery.session.batch import run_batch
from iquery.session.interactive import InteractiveSession
from iquery.session.lifecycle import engine_session

__all__ = ["InteractiveSession", "engine_session", "run_batch"]
