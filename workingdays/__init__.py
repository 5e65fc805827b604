"""
Working Days - business-time arithmetic for a fixed regional calendar.
"""

__version__ = "1.0.0"
