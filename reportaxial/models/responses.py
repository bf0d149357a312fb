from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from reportaxial.db.base import Base, utcnow

class Response(Base):
    __tablename__ = "responses"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # uma única resposta formal por problema (a última ganha)
    problem_id = Column(Integer, ForeignKey("problems.id"), nullable=False, unique=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)

    response_text = Column(Text, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
