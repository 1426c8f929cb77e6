"""
gamemock - configurable mock of the game platform's callback-driven API
"""

__version__ = "0.1.0"
