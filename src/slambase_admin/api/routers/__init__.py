"""
slambase_admin.api.routers

Route modules. Everything under `/admin` is a protected screen except the
login screen itself.
"""

# Package marker.
