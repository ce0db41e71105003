"""
security/ - Access control and rate limiting decorators for handlers.
"""
