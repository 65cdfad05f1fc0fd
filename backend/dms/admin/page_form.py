from dms.models.page import Page
from dms.plugins.context import HookContext
from dms.plugins.registry import get_page_extensions
from .fields import FieldList, ReadonlyField, TextField


def build_page_fields(page: Page, context: HookContext) -> FieldList:
    """
    Edit screen for a page: the host's own fields, then whatever the
    registered page extensions add.
    """
    fields = FieldList()
    fields.add_field_to_tab("Root.Main", TextField("Title", "Page name", page.title))
    fields.add_field_to_tab("Root.Main", TextField("Slug", "URL segment", page.slug))
    fields.add_field_to_tab("Root.Main", ReadonlyField("Status", "Status", page.status))
    fields.find_or_make_tab("Root.Main").title = "Main content"

    get_page_extensions().invoke("update_cms_fields", page, fields, context)

    return fields
