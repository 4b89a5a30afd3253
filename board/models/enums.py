import enum


class Role(str, enum.Enum):
    """Permission level of a user."""

    MEMBER = "member"
    MODERATOR = "moderator"


class ReportStatus(str, enum.Enum):
    """Report lifecycle: PENDING moves to RESOLVED or DISMISSED by moderator action."""

    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class ReportTargetType(str, enum.Enum):
    POST = "post"
    COMMENT = "comment"
