"""Diff an article's stored tags against the tag set submitted by an editor."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping


@dataclass
class TagPlan:
    """Changes needed to turn the stored tag set into the submitted one."""

    to_create: list[dict[str, Any]] = field(default_factory=list)
    to_update: list[dict[str, Any]] = field(default_factory=list)
    to_delete: list[Any] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)


def _get(tag: Any, name: str) -> Any:
    if isinstance(tag, Mapping):
        return tag.get(name)
    return getattr(tag, name, None)


class TagReconciler:
    """Pure diff of tags; count and uniqueness limits are the caller's job."""

    @staticmethod
    def reconcile(existing: Iterable[Any], desired: Iterable[Mapping[str, Any]]) -> TagPlan:
        remaining = {_get(tag, "id"): tag for tag in existing}
        plan = TagPlan()

        for tag in desired:
            tag_id = tag.get("id")
            name = tag["name"]
            if tag_id is not None and tag_id in remaining:
                current = remaining.pop(tag_id)
                if _get(current, "name") != name:
                    plan.to_update.append({"id": tag_id, "name": name})
            else:
                # Unknown ids (stale or from another article) become new tags.
                plan.to_create.append({"name": name})

        plan.to_delete.extend(remaining.keys())
        return plan


tag_reconciler = TagReconciler()

__all__ = ["TagPlan", "TagReconciler", "tag_reconciler"]
