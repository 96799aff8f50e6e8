"""
Notehub.

- backend/: Note store, review scheduler, HTTP API, configuration
"""
