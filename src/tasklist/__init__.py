"""
tasklist: a single-user task list kept in a local SQLite store.

Packages:
- tasks/: models, storage lifecycle, repository, projection, service
- core/: errors, ports, notifier, app state
- cli/ + connectors/: console front end
"""
