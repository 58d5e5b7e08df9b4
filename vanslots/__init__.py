"""
vanslots - office availability and time-slot engine for van rentals.
"""

__version__ = "0.1.0"
