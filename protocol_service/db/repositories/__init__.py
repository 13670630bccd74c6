"""
Per-domain repository modules for database access.

Each module takes an explicit `Session` as its first argument and raises the
typed errors from `protocol_service.db.errors`.
"""
