"""
slambase_admin.auth

Authentication/authorization package.

Responsibilities:
- Access-token helpers and session resolution.
- The admin gate: one pure decision shared by the request middleware and the
  page-level guard dependency.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here stores credentials; identity lives on the hosted platform and admin
# membership lives in the `admin_users` table.
