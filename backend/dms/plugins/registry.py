"""
Page extension registry.

Extensions are plain objects. The host looks hooks up by name, so an
extension only implements the capabilities it needs
(``update_cms_fields``, ``on_before_delete``, ``on_before_publish``, ...).
"""

from __future__ import annotations

import logging
from typing import Any, List

from flask import Flask, current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = "page_extensions"


class PageExtensionRegistry:
    def __init__(self):
        self._extensions: List[Any] = []

    def init_app(self, app: Flask) -> None:
        app.extensions[EXTENSION_KEY] = self

    def register(self, extension: Any) -> Any:
        self._extensions.append(extension)
        logger.debug("Registered page extension %s", type(extension).__name__)
        return extension

    @property
    def extensions(self) -> List[Any]:
        return list(self._extensions)

    def providers(self, hook: str) -> List[Any]:
        return [ext for ext in self._extensions if callable(getattr(ext, hook, None))]

    def invoke(self, hook: str, *args: Any, **kwargs: Any) -> None:
        """
        Call ``hook`` on every extension that provides it, in registration
        order. Exceptions propagate so the triggering operation aborts.
        """
        for extension in self.providers(hook):
            getattr(extension, hook)(*args, **kwargs)


def get_page_extensions() -> PageExtensionRegistry:
    return current_app.extensions[EXTENSION_KEY]
