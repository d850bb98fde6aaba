"""
DeleteLicenseCommand.

Command to hard delete a license (admin only).
"""
from dataclasses import dataclass, field

from audit.domain.entry import RequestContext


@dataclass
class DeleteLicenseCommand:
    """Command to delete a license."""

    license_key: str
    actor: str
    context: RequestContext = field(default_factory=RequestContext)
