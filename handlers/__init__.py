"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses command arguments, delegates to
the appropriate Service bound to the chat's BudgetSession, and sends the
reply back. No business logic lives here.
"""
