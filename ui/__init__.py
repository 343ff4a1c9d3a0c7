"""
Task Assistant console UI - Task list rendering and an interactive prompt
"""

__version__ = "1.0.0"
