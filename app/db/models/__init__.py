from app.db.models.volunteer import Volunteer
from app.db.models.team import Team
from app.db.models.team_member import TeamMember

__all__ = ["Volunteer", "Team", "TeamMember"]
