from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel

RawRecord = dict[str, Any]


class ViewModel(BaseModel):
    """Immutable view model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class RawContext(ViewModel):
    """Context payload as returned by the remote record service."""

    object_api_name: str = Field(description="API name of the primary record's object (e.g. 'Account')")
    record: RawRecord = Field(description="Primary record, field identifier to raw value")
    related_records: dict[str, list[RawRecord] | None] = Field(
        default_factory=dict,
        description="Related list name to the records in that list",
    )


class DisplayField(ViewModel):
    key: str
    label: str
    value: str
    api_name: str


class ColumnTypeAttributes(ViewModel):
    label: str
    name: str
    title: str
    variant: str


class ColumnDef(ViewModel):
    label: str
    field_name: str | None = None
    type: Literal["text", "button"] = "text"
    type_attributes: ColumnTypeAttributes | None = None

    @model_serializer(mode="wrap")
    def _omit_empty_keys(self, handler) -> dict[str, Any]:
        # Text columns carry no typeAttributes, the View button no fieldName.
        return {key: value for key, value in handler(self).items() if value is not None}


class RelatedListView(ViewModel):
    name: str
    label: str
    count: int = Field(ge=0)
    records: list[RawRecord]
    columns: list[ColumnDef]

    @model_validator(mode="after")
    def _count_matches_records(self) -> "RelatedListView":
        if self.count != len(self.records):
            raise ValueError(f"count {self.count} does not match {len(self.records)} records")
        return self


class RecordContextView(ViewModel):
    """Render-ready view of a record and its non-empty related lists."""

    object_api_name: str
    display_fields: list[DisplayField] = Field(default_factory=list)
    related_lists: list[RelatedListView] = Field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.display_fields) or bool(self.related_lists)


class Notification(ViewModel):
    title: str
    message: str
    variant: Literal["info", "success", "warning", "error"] = "info"


class PageReference(ViewModel):
    type: str
    attributes: dict[str, str]
