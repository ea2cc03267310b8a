"""The closed set of audit kinds."""

from __future__ import annotations

from enum import Enum
from typing import Union

from ..exceptions import UnsupportedAuditKind


class AuditKind(str, Enum):
    ACCESSIBILITY = "accessibility"
    PERFORMANCE = "performance"
    SEO = "seo"
    SECURITY = "security"
    BEST_PRACTICES = "best-practices"
    PWA = "pwa"


def parse_kind(kind: Union[AuditKind, str]) -> AuditKind:
    """Coerce ``kind`` into an AuditKind.

    Raises:
        UnsupportedAuditKind: For any value outside the set, including the
            planned-but-unbuilt kinds (mobile, links, i18n, privacy).
    """
    if isinstance(kind, AuditKind):
        return kind
    try:
        return AuditKind(kind)
    except ValueError:
        raise UnsupportedAuditKind(kind, [k.value for k in AuditKind]) from None
