from sqlalchemy import Column, Text

from app.db.base import Base


class Volunteer(Base):
    __tablename__ = "volunteers"

    email = Column(Text, primary_key=True)
    # crypt(3) hash, see the volunteers migration
    password = Column(Text, nullable=False)
