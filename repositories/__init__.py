"""
repositories/ - Data Access Layer
==================================
Each repository wraps one collection of the in-memory BudgetSession.
Repositories hand out domain model objects and keep no state of their own.
"""
