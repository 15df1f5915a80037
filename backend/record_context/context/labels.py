import re

_CUSTOM_FIELD_SUFFIX = re.compile(r"__c$")
# camelCase / digit boundaries ("firstName", "Line2Street") and the tail of an
# acronym run ("HTTPServer" -> "HTTP Server"). A bare acronym ("ID") stays whole.
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def _to_sentence_case(text: str) -> str:
    text = _WORD_BOUNDARY.sub(" ", text)
    text = text.replace("_", " ")
    text = " ".join(text.split()).lower()
    return text[:1].upper() + text[1:]


def humanize(identifier: str) -> str:
    """
    Turn a raw field identifier into a display label.

    `First_Name__c` -> `First name`, `CreatedDate` -> `Created date`, `ID` -> `Id`.
    Returns an empty string when nothing is left after stripping the custom suffix.
    """
    return _to_sentence_case(_CUSTOM_FIELD_SUFFIX.sub("", identifier or ""))


def humanize_list_name(name: str) -> str:
    """Display label for a related list name; list names keep any suffix."""
    return _to_sentence_case(name or "")
