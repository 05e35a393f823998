"""
lounge-memo - race result recorder

Classifies the on-screen state of a racing game from a live video feed and
records each race's course and finishing position, purely from pixels.
"""

__version__ = "0.3.0"
