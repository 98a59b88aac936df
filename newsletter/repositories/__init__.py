"""Repository interfaces and implementations.

This package defines abstract repository interfaces for newsletters,
subscribers and pending activations, and their SQLite adapters under
:mod:`newsletter.repositories.sqlite`. Every operation receives the
:class:`~newsletter.plugin.Plugin` selecting its data source, except the
portal queries which always use the default pool.
"""
