"""
UpdateLicenseCommand.

Command to change fields of a license (admin only).
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from audit.domain.entry import RequestContext


@dataclass
class UpdateLicenseCommand:
    """Command to update a license."""

    license_key: str
    actor: str
    changes: Dict[str, Any] = field(default_factory=dict)
    context: RequestContext = field(default_factory=RequestContext)
