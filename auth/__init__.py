"""
auth — SQLite-backed authentication extension.

Provides:
  • ``CredentialStore`` over the ``users`` table (async SQLAlchemy)
  • Password hashing (bcrypt, optional legacy MD5 verification)
  • Register / Login API routes
  • ``AuthExtension`` for mounting the routes into a host router
"""
