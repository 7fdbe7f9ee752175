"""
Shared building blocks used by every feature module.
"""

from smartlearn.modules.shared.access import is_owner
from smartlearn.modules.shared.models import BaseModel
from smartlearn.modules.shared.schemas import MessageResponse, PageResponse, page_offset

__all__ = ["BaseModel", "MessageResponse", "PageResponse", "is_owner", "page_offset"]
