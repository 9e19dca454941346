from .user import User
from .athlete import Athlete
from .team import Team, TeamCoach, TeamAthlete
from .event import Event, EventInvitation

__all__ = [
    "User",
    "Athlete",
    "Team",
    "TeamCoach",
    "TeamAthlete",
    "Event",
    "EventInvitation",
]
