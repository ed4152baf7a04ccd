"""
API route modules for the registry.

This package contains subrouters for:
- Access: owner-only grants and permission checks
- Inventory: lots, locations, items and item components
- Operations: services, processes and their lifecycles
- Resources: notes, generic reads, counts and note attachment

Routers are included from registry_api.api.main (under the /api/v1 prefix).
"""
