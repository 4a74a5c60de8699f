"""Focus set: the objects the agent is currently scoped to."""

from hecomlink.core.types import ObjectSummary


class FocusSet:
    def __init__(self):
        self._objects: list[ObjectSummary] = []

    def replace(self, objects: list[ObjectSummary]) -> None:
        self._objects = list(objects)

    def clear(self) -> None:
        self._objects = []

    @property
    def objects(self) -> list[ObjectSummary]:
        return list(self._objects)

    def names(self) -> list[str]:
        """Distinct object names, in first-seen order."""
        return list(dict.fromkeys(o.name for o in self._objects))

    def __len__(self) -> int:
        return len(self._objects)

    def __bool__(self) -> bool:
        return bool(self._objects)
