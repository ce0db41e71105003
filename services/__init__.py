"""
services/ - Business Logic Layer
=================================
Pure ledger, recurring and aggregation functions, plus session-bound
services that turn results and errors into chat replies.
"""
