from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    # gravado sem tzinfo, sempre em UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)
