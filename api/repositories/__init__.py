"""
Persistence adapters.

Services depend on SQLRepository instead of touching SQLAlchemy sessions
directly; the repository receives the Storage handle it reads from.
"""
