"""Attendance ledger package.

Feature modules (users, events, temporal, reconciliation) each keep a plain
domain model, a repository Protocol with a MySQL implementation, and a service
layer. The Flask adapter in ``api`` is intentionally thin.
"""
