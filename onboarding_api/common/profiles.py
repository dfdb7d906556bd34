# onboarding_api/common/profiles.py
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from flask import current_app


@dataclass(frozen=True)
class IntakeProfile:
    """
    Deployment-level strictness knobs.

    - required_documents : top-level document slots a submission must attach
    - optional_fields    : scalar fields that may be left blank
    - expose_error_detail: attach internal error text to 5xx responses
    """
    name: str
    required_documents: Tuple[str, ...]
    optional_fields: FrozenSet[str] = frozenset()
    expose_error_detail: bool = False


STRICT = IntakeProfile(
    name="strict",
    required_documents=(
        "emp_ssc_doc", "emp_inter_doc", "emp_grad_doc",
        "resume", "id_proof", "signed_document",
    ),
)

RELAXED = IntakeProfile(
    name="relaxed",
    required_documents=("resume", "id_proof"),
    optional_fields=frozenset({"emp_bank_branch", "inter_branch", "grad_branch"}),
    expose_error_detail=True,
)

PROFILES = {p.name: p for p in (STRICT, RELAXED)}


def get_profile(name: str | None) -> IntakeProfile:
    key = (name or STRICT.name).strip().lower()
    if key not in PROFILES:
        raise ValueError(f"Unknown intake profile {name!r} (expected one of {sorted(PROFILES)})")
    return PROFILES[key]


def current_profile() -> IntakeProfile:
    return get_profile(current_app.config.get("INTAKE_PROFILE"))
