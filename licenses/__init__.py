"""
Licenses module - license issuance, binding and validation.

This module handles:
- License key generation
- License entity and validation state machine
- Persistence port and its backend engines
- Issuance and admin lifecycle handlers
"""
