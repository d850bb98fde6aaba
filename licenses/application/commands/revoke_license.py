"""
RevokeLicenseCommand.

Command to revoke a license.
"""
from dataclasses import dataclass, field
from typing import Optional

from audit.domain.entry import RequestContext


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license."""

    license_key: str
    actor: Optional[str] = None
    context: RequestContext = field(default_factory=RequestContext)
