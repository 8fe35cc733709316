"""Form descriptors returned by the ``new`` and ``edit`` actions."""
from typing import Any

from blog.schemas import FormDescriptor
from blog.validators import Rule, describe


def build_form(
    resource: str,
    action: str,
    method: str,
    path: str,
    rules: list[Rule],
    extra_fields: dict[str, dict[str, Any]] | None = None,
    values: dict[str, Any] | None = None,
) -> FormDescriptor:
    fields = describe(rules)
    for name, spec in (extra_fields or {}).items():
        fields.setdefault(name, {"required": False}).update(spec)
    return FormDescriptor(
        resource=resource,
        action=action,
        method=method,
        path=path,
        fields=fields,
        values=values or {},
    )
