"""
Skyline Trips - vacation browsing and management API.
"""

__version__ = "1.0.0"
