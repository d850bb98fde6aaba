"""
Core module for shared infrastructure.

This module contains:
- Domain exceptions and value objects
- Prometheus metrics
- Middleware components
- Health check views
"""
