"""
Records Service: the data tier behind the prescription BFF.
"""
__version__ = "1.0.0"
