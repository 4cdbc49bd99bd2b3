"""
Core utilities shared across the productos API.

This package hosts the configuration helpers (env vars, file paths) and the
logging setup used by repositories, services and routers.
"""
