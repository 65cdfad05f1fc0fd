from enum import Enum
from typing import Set


class Stage(str, Enum):
    DRAFT = "draft"
    LIVE = "live"


class IllegalTransition(ValueError):
    pass


# Explicit allowed state transitions
ALLOWED_PAGE_TRANSITIONS: dict[str, Set[str]] = {
    "draft": {"published"},
    # unpublish removes the page from live; republishing runs the publish hooks again
    "published": {"draft", "published"},
}

def assert_page_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards page lifecycle transitions.
    Single source of truth for status changes.
    """
    allowed = ALLOWED_PAGE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise IllegalTransition(
            f"Illegal page transition: {from_status} → {to_status}"
        )
