from pydantic import RootModel


class TeamMemberCounts(RootModel[dict[str, int]]):
    """Team id -> member count. Teams without members are not listed."""
