"""
UI front ends for the scanner screen.
"""

from .console import ConsoleScreen, format_state
