"""
Audit module - append-only trail of license events.

This module handles:
- AuditLogEntry entity and action names
- AuditLogger service writing through the license store
"""
