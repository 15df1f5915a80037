import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from record_context.context.columns import derive_columns
from record_context.context.errors import MalformedContextError
from record_context.context.labels import humanize, humanize_list_name
from record_context.context.values import format_value
from record_context.context.views import (
    DisplayField,
    RawContext,
    RawRecord,
    RecordContextView,
    RelatedListView,
)

logger = logging.getLogger(__name__)

METADATA_KEY = "attributes"


def validate_context(payload: RawContext | Mapping[str, Any]) -> RawContext:
    if isinstance(payload, RawContext):
        return payload
    if not isinstance(payload, Mapping):
        raise MalformedContextError(
            f"Context payload must be a mapping, got {type(payload).__name__}"
        )
    try:
        return RawContext.model_validate(payload)
    except ValidationError as exc:
        raise MalformedContextError(f"Malformed context payload: {exc}") from exc


def build_display_fields(record: RawRecord) -> list[DisplayField]:
    return [
        DisplayField(
            key=field,
            label=humanize(field),
            value=format_value(value),
            api_name=field,
        )
        for field, value in record.items()
        if field != METADATA_KEY
    ]


def build_related_lists(related_records: Mapping[str, list[RawRecord] | None]) -> list[RelatedListView]:
    lists: list[RelatedListView] = []
    for name, records in related_records.items():
        if not records:
            continue
        lists.append(
            RelatedListView(
                name=name,
                label=humanize_list_name(name),
                count=len(records),
                records=list(records),
                columns=derive_columns(records[0]),
            )
        )
    return lists


def aggregate(payload: RawContext | Mapping[str, Any]) -> RecordContextView:
    """
    Normalize a raw context payload into a render-ready view.

    Raises MalformedContextError when the payload does not have the
    objectApiName/record/relatedRecords shape. Pure: the same payload always
    yields an equal view.
    """
    ctx = validate_context(payload)
    view = RecordContextView(
        object_api_name=ctx.object_api_name,
        display_fields=build_display_fields(ctx.record),
        related_lists=build_related_lists(ctx.related_records),
    )
    logger.debug(
        "Aggregated %s context: %s fields, %s related lists",
        ctx.object_api_name,
        len(view.display_fields),
        len(view.related_lists),
    )
    return view
