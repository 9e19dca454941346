from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    COACH = "COACH"
    ATHLETE = "ATHLETE"


# Roles that bypass relationship scoping entirely
PRIVILEGED_ROLES = (Role.ADMIN, Role.STAFF)

# Roles a user may pick for themselves at signup
SELF_SIGNUP_ROLES = (Role.COACH, Role.ATHLETE)


class UserStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AthleteStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class DominantFoot(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    BOTH = "BOTH"


class TeamStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class EventType(str, Enum):
    TRAINING = "TRAINING"
    MATCH = "MATCH"
    MEETING = "MEETING"
    TEST = "TEST"
    OTHER = "OTHER"


class RsvpStatus(str, Enum):
    PENDING = "PENDING"
    YES = "YES"
    NO = "NO"
    MAYBE = "MAYBE"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"
