"""
Task subsystem.

Components:
- task_models.py: data structures (Task, InitState, OpResult) + row mapping
- storage.py: opens the SQLite handle once and ensures the schema
- task_store.py: async CRUD over the todos table
- projection.py: in-memory snapshot + the refresh that rebuilds it
- task_api.py: fail-safe service used by the front end
"""
