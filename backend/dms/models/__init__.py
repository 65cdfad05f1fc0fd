from .tenant import Tenant
from .user import User
from .page import Page
from .page_version import PageVersion
from .document import Document
from .document_set import DocumentSet, DocumentSetDocument
from .audit_log import AuditLog

__all__ = [
    "Tenant",
    "User",
    "Page",
    "PageVersion",
    "Document",
    "DocumentSet",
    "DocumentSetDocument",
    "AuditLog",
]
