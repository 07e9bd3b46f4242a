"""
slambase_admin.observability

Observability package.

Responsibilities:
- JSON logging via structlog, with credential fields masked.
- Request id and admin context bound per request.
"""

# Package marker.
