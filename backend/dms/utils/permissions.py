from typing import Iterable, Optional

ADMIN = "ADMIN"
CMS_ACCESS_DOCUMENT_ADMIN = "CMS_ACCESS_DOCUMENT_ADMIN"

DOCUMENT_ADMIN_PERMISSIONS = (ADMIN, CMS_ACCESS_DOCUMENT_ADMIN)


def granted_codes(user) -> set[str]:
    codes = set(user.permissions or [])
    if user.role == "admin":
        codes.add(ADMIN)
    return codes


def has_permission(user: Optional[object], codes: Iterable[str]) -> bool:
    """
    True when the user holds any of ``codes``. ADMIN implies every code.
    Missing or inactive users hold nothing.
    """
    if user is None or not getattr(user, "is_active", False):
        return False

    granted = granted_codes(user)
    if ADMIN in granted:
        return True

    return any(code in granted for code in codes)
