"""
Public Pydantic schemas used by FastAPI routes, the registry and tests.

Schemas are grouped by concern (resources, access) and also include common
reusable models such as id/count responses and the error envelope.
"""

from .common import MessageResponse  # noqa: F401
from .enums import ResourceKind  # noqa: F401
