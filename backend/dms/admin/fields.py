# dms/admin/fields.py
"""
Form model for the page edit screen.

The edit screen is a tree of tabs under ``Root`` (``Root.Main``,
``Root.DocumentSets``, ...). Page extensions receive the ``FieldList``
before it is serialized and may add tabs or fields to it.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy import or_


class FormField:
    field_type = "field"

    def __init__(self, name: str, title: Optional[str] = None, value: Any = None):
        self.name = name
        self.title = name if title is None else title
        self.value = value
        self.extra_classes: List[str] = []

    def add_extra_class(self, css_class: str) -> "FormField":
        if css_class not in self.extra_classes:
            self.extra_classes.append(css_class)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.field_type,
            "name": self.name,
            "title": self.title,
            "value": self.value,
            "classes": list(self.extra_classes),
        }


class TextField(FormField):
    field_type = "text"


class ReadonlyField(FormField):
    field_type = "readonly"


class AddExistingAutocompleter:
    """
    "Add existing" search for a relation grid.

    ``search_list`` is a query over the candidate records; until one is
    set the component offers nothing.
    """

    def __init__(self, search_fields: Iterable[str] = ("title",), result_limit: int = 20):
        self.search_fields = tuple(search_fields)
        self.result_limit = result_limit
        self.search_list = None

    def set_search_list(self, query) -> "AddExistingAutocompleter":
        self.search_list = query
        return self

    def search(self, term: Optional[str] = None, limit: Optional[int] = None) -> list:
        if self.search_list is None:
            return []

        query = self.search_list
        if term:
            model = query.column_descriptions[0]["entity"]
            query = query.filter(
                or_(*[
                    getattr(model, field).ilike(f"%{term}%")
                    for field in self.search_fields
                ])
            )

        return query.limit(limit or self.result_limit).all()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "search_fields": list(self.search_fields),
            "result_limit": self.result_limit,
            "enabled": self.search_list is not None,
        }


class RelationEditorConfig:
    """Grid configuration for editing a has-many relation: add, edit, unlink."""

    actions = ("add", "edit", "unlink")

    def __init__(self):
        self.components: List[Any] = [AddExistingAutocompleter()]

    def get_component_by_type(self, component_type):
        for component in self.components:
            if isinstance(component, component_type):
                return component
        return None

    def to_dict(self) -> Dict[str, Any]:
        autocompleter = self.get_component_by_type(AddExistingAutocompleter)
        return {
            "actions": list(self.actions),
            "add_existing": autocompleter.to_dict() if autocompleter else None,
        }


class GridField(FormField):
    field_type = "grid"

    def __init__(
        self,
        name: str,
        title: Optional[str] = None,
        items: Optional[Iterable[Any]] = None,
        config: Optional[RelationEditorConfig] = None,
        normalize: Optional[Callable[[Any], Dict[str, Any]]] = None,
    ):
        super().__init__(name, title)
        self.items = list(items or [])
        self.config = config or RelationEditorConfig()
        self.normalize = normalize

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        normalize = self.normalize or (lambda item: {"id": item.id})
        data["items"] = [normalize(item) for item in self.items]
        data["config"] = self.config.to_dict()
        return data


class Tab:
    def __init__(self, name: str, title: Optional[str] = None):
        self.name = name
        self.title = title or name
        self.fields: List[FormField] = []

    def push(self, field: FormField) -> None:
        self.fields.append(field)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "fields": [field.to_dict() for field in self.fields],
        }


class FieldList:
    ROOT = "Root"

    def __init__(self):
        self.tabs: List[Tab] = []

    @classmethod
    def _tab_name(cls, path: str) -> str:
        prefix, _, name = path.partition(".")
        if prefix != cls.ROOT or not name:
            raise ValueError(f"Tab path must look like 'Root.<Name>', got {path!r}")
        return name

    def find_tab(self, path: str) -> Optional[Tab]:
        name = self._tab_name(path)
        for tab in self.tabs:
            if tab.name == name:
                return tab
        return None

    def find_or_make_tab(self, path: str) -> Tab:
        tab = self.find_tab(path)
        if tab is None:
            tab = Tab(self._tab_name(path))
            self.tabs.append(tab)
        return tab

    def add_field_to_tab(self, path: str, field: FormField) -> FormField:
        self.find_or_make_tab(path).push(field)
        return field

    def data_field(self, name: str) -> Optional[FormField]:
        for tab in self.tabs:
            for field in tab.fields:
                if field.name == name:
                    return field
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"tabs": [tab.to_dict() for tab in self.tabs]}
