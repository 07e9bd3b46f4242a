"""
slambase_admin.services

Service layer (transaction owners).

Responsibilities:
- Multi-step write flows that span the database and object storage.
"""

# Package marker.
