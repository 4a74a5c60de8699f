"""
Business-object metadata types.

One set of structures for what the platform tells us about its object
types: the list entry, the full description with biz types and fields,
and the references callers use to point at objects. Upstream payloads are
normalized into these at the service boundary; nothing downstream reads
raw platform dicts.
"""

from dataclasses import dataclass, field
from typing import Any

SELECT_FIELD_TYPES = frozenset({"Select", "MultiSelect"})


# ---------------------------------------------------------------------------
# Object list
# ---------------------------------------------------------------------------

@dataclass
class ObjectSummary:
    """One remote business-object type as listed by the platform."""
    name: str
    label: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ObjectSummary":
        return cls(name=data["name"], label=data.get("label") or "", description=data.get("description"))


@dataclass
class ObjectRef:
    """Caller-supplied pointer at an object, by name and optionally by label."""
    name: str = ""
    label: str | None = None

    def matches(self, obj: ObjectSummary) -> bool:
        if obj.name == self.name:
            return True
        return self.label is not None and obj.label == self.label


# ---------------------------------------------------------------------------
# Object description
# ---------------------------------------------------------------------------

@dataclass
class NamedItem:
    """A {name, label} pair; biz types and select options share this shape."""
    name: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "label": self.label}


@dataclass
class FieldDescriptor:
    name: str
    label: str
    type: str
    sub_type: str | None = None
    select_items: list[NamedItem] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name, "label": self.label, "type": self.type}
        if self.sub_type:
            d["subType"] = self.sub_type
        if self.select_items is not None:
            d["selectItems"] = [i.to_dict() for i in self.select_items]
        return d

    @classmethod
    def from_upstream(cls, data: dict[str, Any]) -> "FieldDescriptor":
        ftype = data.get("type") or ""
        select_items = None
        if ftype in SELECT_FIELD_TYPES:
            raw = (data.get("attributes") or {}).get("selectItems") or []
            select_items = [NamedItem(name=i.get("name", ""), label=i.get("label", "")) for i in raw]
        return cls(
            name=data.get("name", ""),
            label=data.get("label", ""),
            type=ftype,
            sub_type=data.get("subType") or None,
            select_items=select_items,
        )


@dataclass
class ObjectDetail:
    """Full description of one object type: biz types and fields."""
    name: str
    label: str
    biz_types: list[NamedItem] = field(default_factory=list)
    fields: list[FieldDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bizTypes": [b.to_dict() for b in self.biz_types],
            "fields": [f.to_dict() for f in self.fields],
            "name": self.name,
            "label": self.label,
        }

    @classmethod
    def from_upstream(cls, data: dict[str, Any], name: str, label: str | None = None) -> "ObjectDetail":
        """
        Normalize a raw platform description.

        ``name`` and ``label`` are what the caller asked for; they fill in
        when the platform leaves its own name or label empty.
        """
        return cls(
            name=data.get("name") or name,
            label=data.get("label") or label or name,
            biz_types=[NamedItem(name=b.get("name", ""), label=b.get("label", "")) for b in data.get("bizTypes") or []],
            fields=[FieldDescriptor.from_upstream(f) for f in data.get("fieldList") or []],
        )
