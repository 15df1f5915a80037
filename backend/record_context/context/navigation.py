from collections.abc import Mapping
from typing import Any

from record_context.context.columns import ID_FIELD
from record_context.context.errors import MalformedContextError
from record_context.context.views import PageReference

RECORD_PAGE = "standard__recordPage"


def record_page_reference(row: Mapping[str, Any]) -> PageReference:
    """Page reference opening the detail view of a related-list row."""
    record_id = row.get(ID_FIELD) if isinstance(row, Mapping) else None
    if not record_id:
        raise MalformedContextError(f"Row has no {ID_FIELD} to navigate to")
    return PageReference(
        type=RECORD_PAGE,
        attributes={"recordId": str(record_id), "actionName": "view"},
    )
