"""
ListAuditLogsQuery.

Query for a page of audit entries, newest first.
"""
from dataclasses import dataclass


@dataclass
class ListAuditLogsQuery:
    """Query to list audit entries."""

    limit: int = 100
    offset: int = 0
