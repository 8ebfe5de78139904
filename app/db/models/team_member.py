from sqlalchemy import Column, ForeignKey, Text

from app.db.base import Base


class TeamMember(Base):
    __tablename__ = "team_members"

    team_id = Column(Text, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    volunteer_email = Column(
        Text, ForeignKey("volunteers.email", ondelete="CASCADE"), primary_key=True
    )
