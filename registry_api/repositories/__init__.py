"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for entities, relationship lists,
identifier counters and access-control state. They share the session (and
therefore the transaction) the registry opened for the current operation.
"""
