from collections.abc import Mapping
from typing import Any

from record_context.context.labels import humanize
from record_context.context.views import ColumnDef, ColumnTypeAttributes

ID_FIELD = "Id"
VIEW_ACTION_NAME = "view_record"

VIEW_COLUMN = ColumnDef(
    label="View",
    type="button",
    type_attributes=ColumnTypeAttributes(
        label="View",
        name=VIEW_ACTION_NAME,
        title="View Record",
        variant="base",
    ),
)


def derive_columns(sample_record: Mapping[str, Any]) -> list[ColumnDef]:
    """
    Build the column schema of a related list from one sample row.

    Every field except the identifier becomes a text column, in field order,
    followed by a single "View" button column for row navigation. The schema is
    applied to every row of the list; fields that only appear in later rows
    have no column.
    """
    columns = [
        ColumnDef(label=humanize(field), field_name=field, type="text")
        for field in sample_record
        if field != ID_FIELD
    ]
    columns.append(VIEW_COLUMN)
    return columns
