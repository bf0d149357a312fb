from sqlalchemy import Column, Integer, String, DateTime
from reportaxial.db.base import Base, utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)

    # store / supplier / admin
    user_type = Column(String, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
