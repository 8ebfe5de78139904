"""Domain records shared by every store implementation.

This package defines *what* a volunteer and a team are, independent from
*where* they are kept (memory, relational database) or how they travel over
HTTP.
"""

from app.domain.models import Team, Volunteer

__all__ = ["Team", "Volunteer"]
