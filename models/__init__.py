"""
models/ - Domain Layer
=======================
Plain dataclasses for debts, logs, filters and the session snapshot.
No I/O and no framework imports.
"""
