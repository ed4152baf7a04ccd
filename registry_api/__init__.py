"""
Operational entity registry.

A permissioned registry of lots, locations, items, services, notes and
processes, served over HTTP by registry_api.api.main:app.
"""

__version__ = "0.1.0"
