from urllib.parse import parse_qsl


def parse_query_params(query: str | None) -> dict[str, str]:
    """Flatten a URL query string into a name -> value mapping; the last occurrence wins."""
    text = (query or "").lstrip("?")
    return dict(parse_qsl(text, keep_blank_values=True))
