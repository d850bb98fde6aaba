"""
GetLicenseInfoQuery.

Query for a read-only summary of a currently valid license.
"""
from dataclasses import dataclass


@dataclass
class GetLicenseInfoQuery:
    """Query to get license info by key."""

    license_key: str
