"""
slambase_admin.platform

Client boundaries for the hosted identity/data platform.

Responsibilities:
- Identity API client (sign in, refresh, user lookup, sign out).
- Object storage client (upload, public URLs, removal).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Relational data is not reached through these clients; it goes through the
# SQLAlchemy layer in `slambase_admin.db` against the platform's Postgres.
