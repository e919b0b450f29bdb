from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..core.constants import DEFAULT_DEPARTMENT, DEFAULT_DESIGNATION, FACULTY_EMAIL_DOMAIN, STUDENT_EMAIL_DOMAIN
from ..core.enums import Role


@dataclass(frozen=True)
class AccountRequest:
    """Everything needed to create one imported account."""

    role: Role
    external_id: str
    name: str
    email: str
    password: str
    profile: dict[str, str] = field(default_factory=dict)


class AccountGateway(Protocol):
    """Account creation boundary; implementations may be rate limited.

    ``replace_account`` removes any account with the same role and external id
    and creates the new one as a single unit: when it raises, the previous
    account is still there. It raises ``RateLimitedError`` when the caller
    should back off and ``UpstreamError`` for any other failure.
    """

    def replace_account(self, request: AccountRequest) -> str:
        raise NotImplementedError


def student_request(row: dict[str, str]) -> AccountRequest:
    sid = row["sId"].strip()
    return AccountRequest(
        role=Role.STUDENT,
        external_id=sid,
        name=row["studentName"].strip(),
        email=f"{sid}@{STUDENT_EMAIL_DOMAIN}",
        password=row["sPassword"],
        profile={
            "year": row["studyingYear"].strip(),
            "roll_no": row["rollNo"].strip(),
            "division": row["division"].strip(),
            "batch": row["batch"].strip(),
            "elective_subject": row["electiveSubject"].strip(),
            "department": DEFAULT_DEPARTMENT,
        },
    )


def faculty_request(row: dict[str, str]) -> AccountRequest:
    eid = row["E_ID"].strip()
    return AccountRequest(
        role=Role.FACULTY,
        external_id=eid,
        name=row["name"].strip(),
        email=(row.get("emailID") or "").strip() or f"{eid}@{FACULTY_EMAIL_DOMAIN}",
        password=row["E_password"],
        profile={
            "designation": (row.get("designation") or "").strip() or DEFAULT_DESIGNATION,
            "subject": row["subject"].strip(),
        },
    )
