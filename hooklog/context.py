"""
Per-call request context.

Every service function takes a RequestContext as an explicit argument instead
of looking up the current user from ambient state. Anonymous callers get a
context whose user_id is None.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    user_id: Optional[uuid.UUID] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls()
