"""Session authentication and organization-scoped authorization.

Request flow for pages:
  cookie → tokens.verify_token → session.get_session (re-reads the user)
  → guards.organization_guard → handler

API routes skip the redirect gate and answer 401/403 from the
dependencies in auth.dependencies instead.
"""
