"""SQLite implementations of the repository interfaces."""
