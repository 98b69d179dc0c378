from dataclasses import dataclass, field
from typing import Any, Optional

from django.core.files.storage import Storage, default_storage


@dataclass(frozen=True)
class MutationContext:
    """
    Everything a mutation needs from its surroundings.

    The acting user attributes log entries and scopes which fighters can be
    touched. The storage handle is where fighter images live.
    """

    user: Any
    storage: Storage = field(default_factory=lambda: default_storage)

    @classmethod
    def from_request(cls, request) -> "MutationContext":
        return cls(user=request.user)

    @property
    def owner(self):
        """The user to record as owner of created rows, if any."""
        if self.user is None or not self.user.is_authenticated:
            return None
        return self.user

    @property
    def user_id(self) -> Optional[int]:
        owner = self.owner
        return owner.pk if owner is not None else None
