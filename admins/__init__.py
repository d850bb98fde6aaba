"""
Admins module - administrator authentication.

This module handles:
- AdminUser entity
- Password hashing with a configurable bcrypt cost
- Signed session tokens (JWT)
"""
