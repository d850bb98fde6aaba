"""
Host machine identifier.

Used when a validation request does not carry a machine id, so that
unattended calls from the same host always bind to the same value.
"""

import hashlib
import platform
import socket
import uuid

MACHINE_ID_LENGTH = 16


def _hardware_address() -> str:
    """
    Return the primary MAC address, or an empty string.

    uuid.getnode() falls back to a random number with the multicast bit
    set when no interface address can be read; that value changes per
    process and is not usable here.
    """
    node = uuid.getnode()
    if (node >> 40) & 0x01:
        return ""
    return ":".join(f"{(node >> shift) & 0xFF:02x}" for shift in range(40, -8, -8))


def host_machine_id() -> str:
    """
    Derive a stable identifier for the current host.

    Returns:
        16-character lowercase hex string
    """
    basis = _hardware_address() or socket.gethostname() or platform.node()
    return hashlib.sha256(basis.encode("utf-8", errors="ignore")).hexdigest()[:MACHINE_ID_LENGTH]
