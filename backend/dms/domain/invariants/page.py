from .exceptions import InvariantViolation

def assert_page(page, publish=False):
    if not page.title or not page.slug:
        raise InvariantViolation("Page requires both title and slug.")

    if publish and page.is_deleted_from_stage:
        raise InvariantViolation("Cannot publish a page that was deleted from draft.")
