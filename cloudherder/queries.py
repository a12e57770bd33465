from __future__ import annotations

import json
import re

from .errors import InvalidQueryError

QUERY_FOOTER = """| sort @timestamp desc
    | limit 40"""

_QUERY_INDENT = "\n    "

_LONE_SURROGATE = re.compile(r"[\ud800-\udbff](?![\udc00-\udfff])|(?<![\ud800-\udbff])[\udc00-\udfff]")


def _escape_lone_surrogates(text: str) -> str:
    return _LONE_SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def sanitize_query_string(escaped: str) -> str:
    """Undo the newline escaping of a JSON string literal and drop its quotes.

    Only ``\\n`` is restored. Escaped quotes and backslashes stay escaped, so a
    ``"`` in the input query text comes back as ``\\"``.
    """
    extra_escape_removed = escaped.replace("\\n", "\n")
    return extra_escape_removed[1:-1]


def create_dashboard_query_string(log_group_name: str, base_query: str) -> str:
    """Logs Insights query for a dashboard log widget.

    The text goes through JSON string escaping first. Non-ASCII characters
    pass through unescaped, while unpaired surrogates come back as lowercase
    ``\\udXXX`` escapes, the same as a well-formed ``JSON.stringify``.
    """
    group = str(log_group_name or "")
    if not group.strip():
        raise InvalidQueryError("log group name is required to build a dashboard query")
    query_head = f"SOURCE '{group}'{_QUERY_INDENT}| fields @timestamp, @message"
    raw = f"{query_head}{_QUERY_INDENT}| {base_query}"
    escaped = _escape_lone_surrogates(json.dumps(raw, ensure_ascii=False))
    return sanitize_query_string(escaped)


def create_saved_query_string(query: str) -> str:
    """Body of a saved Logs Insights query definition for ``query``."""
    return f"fields @timestamp, @message{_QUERY_INDENT}| {query}{_QUERY_INDENT}"
