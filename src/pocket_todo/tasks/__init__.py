"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskSnapshot, StoreMode) and errors
- task_store.py: in-memory collections, mutations, editing mode, load
- persistence.py: single-writer snapshot queue towards key-value storage
"""
