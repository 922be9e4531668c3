"""
Prescription BFF - GraphQL front door for the Records Service.

Every query and mutation is forwarded one-to-one to the Records Service.
"""

__version__ = "1.0.0"
