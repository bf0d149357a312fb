from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from reportaxial.db.base import Base, utcnow

class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    problem_id = Column(Integer, ForeignKey("problems.id"), nullable=False, index=True)

    author_role = Column(String, nullable=False)  # store/supplier
    text = Column(Text, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
