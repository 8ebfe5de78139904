from sqlalchemy import Column, Text

from app.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=True)
