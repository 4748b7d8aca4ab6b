"""Shared pydantic plumbing.

Learn: The frontend speaks camelCase (``postalCode``, ``isAdmin``) while
Python code and columns use snake_case. ``ApiModel`` maps between them
with an alias generator, and accepts either spelling on input.
"""

import json

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PatchModel(ApiModel):
    """Partial update — only fields the client actually sent are applied.

    Unknown keys are rejected so a patch can never touch a column the
    entity does not expose (e.g. ``isAdmin``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def changes(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


def coerce_list(value):
    """Accept a list, a JSON-encoded list, or a single scalar.

    Multipart forms cannot carry arrays, so the frontend sends nested
    lists as JSON strings and repeated fields for flat lists.
    """
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return []
        if stripped.startswith("["):
            return json.loads(stripped)
    return [value]


def reject_null(value):
    """For patch fields backed by NOT NULL columns: omit, don't null."""
    if value is None:
        raise ValueError("may be omitted but not null")
    return value
