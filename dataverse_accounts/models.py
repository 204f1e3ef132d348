"""
Account record and writable field set.

Maps between Dataverse column names and the attribute names used by the
rest of the application.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from dataverse_accounts.exceptions import MissingRequiredFieldError

UNNAMED_ACCOUNT = "Unnamed Account"
NAME_REQUIRED_MESSAGE = "Account name is required"

# attribute -> Dataverse column
COLUMN_MAP = {
    "account_id": "accountid",
    "name": "name",
    "account_number": "accountnumber",
    "email": "emailaddress1",
    "phone": "telephone1",
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Account:
    """A single account row as last fetched from the platform."""

    account_id: str
    name: Optional[str] = None
    account_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Account":
        """Build an Account from a Dataverse JSON row (unknown columns ignored)."""
        return cls(
            account_id=str(record.get(COLUMN_MAP["account_id"]) or ""),
            name=_clean(record.get(COLUMN_MAP["name"])),
            account_number=_clean(record.get(COLUMN_MAP["account_number"])),
            email=_clean(record.get(COLUMN_MAP["email"])),
            phone=_clean(record.get(COLUMN_MAP["phone"])),
        )

    @property
    def display_name(self) -> str:
        return self.name or UNNAMED_ACCOUNT

    def detail_lines(self) -> list[str]:
        """Labelled lines for each optional field that is present, in display order."""
        lines = []
        if self.account_number:
            lines.append(f"Account Number: {self.account_number}")
        if self.email:
            lines.append(f"Email: {self.email}")
        if self.phone:
            lines.append(f"Phone: {self.phone}")
        return lines


@dataclass
class AccountFields:
    """Writable subset of an account, as entered in the form."""

    name: str = ""
    email: str = ""
    phone: str = ""

    @classmethod
    def from_account(cls, account: Account | None) -> "AccountFields":
        if account is None:
            return cls()
        return cls(name=account.name or "", email=account.email or "", phone=account.phone or "")

    def validate(self) -> None:
        """Raise MissingRequiredFieldError when the name is blank."""
        if not (self.name or "").strip():
            raise MissingRequiredFieldError("name", message=NAME_REQUIRED_MESSAGE)

    def to_payload(self) -> dict[str, str]:
        """
        Request body for create/update.

        The name is sent as entered; empty optional fields are left out of the
        body entirely rather than sent as empty strings.
        """
        payload = {COLUMN_MAP["name"]: self.name}
        if self.email:
            payload[COLUMN_MAP["email"]] = self.email
        if self.phone:
            payload[COLUMN_MAP["phone"]] = self.phone
        return payload
