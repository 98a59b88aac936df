"""Newsletter persistence layer.

Stores newsletter definitions, subscriptions, pending activation keys and the
links between newsletters and document categories on top of SQLite.
"""

__version__ = "0.1.0"
