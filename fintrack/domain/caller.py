"""Explicit identity of whoever is invoking the ledger."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerScope:
    """A user acting alone, or a user acting on behalf of an organization.

    ``organization_id`` is the organization currently selected by the user, if
    any. It does not remove access to the user's personal accounts.
    """

    user_id: str
    organization_id: str | None = None

    @property
    def is_organization(self) -> bool:
        return self.organization_id is not None

    def log_fields(self) -> dict[str, str]:
        fields = {"user": self.user_id}
        if self.organization_id:
            fields["org"] = self.organization_id
        return fields
