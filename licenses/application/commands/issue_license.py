"""
IssueLicenseCommand.

Command to issue a new license, either self-service or by an admin.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from audit.domain.entry import RequestContext


class IssueChannel(Enum):
    """Who asked for the license."""

    SELF_SERVICE = "self_service"
    ADMIN = "admin"

    def __str__(self) -> str:
        """Return channel as string."""
        return self.value


@dataclass
class IssueLicenseCommand:
    """Command to issue a license."""

    user_email: str
    user_name: str
    duration_days: int
    notes: Optional[str] = None
    channel: IssueChannel = IssueChannel.SELF_SERVICE
    actor: Optional[str] = None
    context: RequestContext = field(default_factory=RequestContext)
