"""
Use cases for the productos API.

Each service orchestrates SQLRepository to implement the catalog reads and the
startup seeding. Routers call these services instead of querying the database
directly.
"""
