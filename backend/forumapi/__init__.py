"""
Forum JSON API.

Permission-filtered, paginated JSON views over a nested-set forum board.
"""

__version__ = "1.0.0"
