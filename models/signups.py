"""
Signup records and the persisted email document
"""
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

NEWSLETTER_SOURCE = "newsletter"
DISCOUNT_SOURCE = "discount_popup"


def utc_timestamp() -> str:
    # e.g. 2024-05-01T12:00:00.000Z
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class SignupRecord(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    email: str
    timestamp: str = Field(default_factory=utc_timestamp)
    source: str = NEWSLETTER_SOURCE


class DiscountRecord(SignupRecord):
    source: str = DISCOUNT_SOURCE
    discountCode: str


def _has_email(records: List[Any], email: str) -> bool:
    return any(isinstance(r, dict) and r.get("email") == email for r in records)


class EmailStoreDocument(BaseModel):
    """The persisted document.

    Stored entries are kept exactly as read from disk; SignupRecord and
    DiscountRecord only shape entries at creation time.
    """

    newsletter: List[Any] = Field(default_factory=list)
    discount: List[Any] = Field(default_factory=list)

    def has_newsletter_email(self, email: str) -> bool:
        return _has_email(self.newsletter, email)

    def has_discount_email(self, email: str) -> bool:
        return _has_email(self.discount, email)

    def add_newsletter(self, record: SignupRecord) -> None:
        self.newsletter.append(record.model_dump())

    def add_discount(self, record: DiscountRecord) -> None:
        self.discount.append(record.model_dump())

    def to_json_dict(self) -> dict:
        return {
            "newsletter": list(self.newsletter),
            "discount": list(self.discount),
        }


class SignupPayload(BaseModel):
    # Left loose so a bad value reaches is_valid_email instead of a 422
    email: Optional[Any] = None
