"""
moviebase.auth

Authentication/authorization package.

Responsibilities:
- Password hashing and verification (bcrypt).
- JWT issuing and validation.
- Credential authentication, token verification and ownership checks.
- FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package touches the ORM directly; the credential store is a
# protocol implemented by `moviebase.db.repositories.users.SqlCredentialStore`.
