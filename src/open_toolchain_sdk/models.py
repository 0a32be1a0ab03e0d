"""Pydantic base for API models and their JSON wire form.

Fields default to ``None`` (absent). A field whose wire name differs from the
attribute name declares it with ``Field(alias=...)``; both names are accepted
when constructing a model. Unknown keys in responses are ignored.

Serialized models leave out absent fields, and nested models that would
serialize to an empty object are left out entirely.

Example:
    ```python
    class Container(Model):
        guid: str | None = None
        type: str | None = None


    class TektonPipeline(Model):
        container: Container | None = None
        pipeline_definition_id: str | None = Field(default=None, alias="pipelineDefinitionId")
    ```
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, SerializationInfo, SerializerFunctionWrapHandler, model_serializer


class Model(BaseModel):
    """Base model for Open Toolchain API objects.

    Configuration:
        - ``populate_by_name=True``: fields can be set by Python name or wire alias.
        - ``extra="ignore"``: unknown response fields are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_serializer(mode="wrap")
    def _omit_empty_models(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo) -> dict[str, Any]:
        data = handler(self)
        for name, field_info in type(self).model_fields.items():
            key = field_info.alias if info.by_alias and field_info.alias else name
            if key not in data:
                continue
            value = getattr(self, name)
            if isinstance(value, Model) and data[key] == {}:
                del data[key]
            elif isinstance(value, Mapping) and isinstance(data[key], dict):
                data[key] = {k: v for k, v in data[key].items() if not (isinstance(value.get(k), Model) and v == {})}
        return data

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready wire form: aliases applied, absent fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def wire_dict(values: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a request body, dropping None values and empty nested models."""
    body = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, Model):
            value = value.to_dict()
            if not value:
                continue
        elif isinstance(value, list):
            value = [item.to_dict() if isinstance(item, Model) else item for item in value]
        body[key] = value
    return body
