"""
Shared helpers: errors, money, months, validation, audit logging.
"""
