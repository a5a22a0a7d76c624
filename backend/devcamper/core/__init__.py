# devcamper/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: default admin creation on first startup
- context: AppContext (settings plus mail and geocoding collaborators)
- db: Database configuration and connection management
- errors: exception hierarchy and the failure envelope handlers
- policy: roles and the ownership/role access rules
- protection: rate limiting, body size cap and security headers
- security: password hashing, JWT and reset tokens
"""
