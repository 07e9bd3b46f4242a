"""
slambase_admin.api

HTTP surface of the SlamBase admin service.

Responsibilities:
- FastAPI app factory, screen routers and dependency wiring.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: parse the request, require an admin, delegate to repos/services.
