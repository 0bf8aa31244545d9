"""
Flexible list field parser.

Request fields such as amenities arrive as a JSON list, a JSON-encoded string
(multipart forms) or a comma-separated string. One grammar covers all three:

    None, '' or []               -> []
    list / tuple                 -> items kept in order, None and '' dropped
    string holding a JSON array  -> that array (same item rules)
    any other string             -> split on ',', items stripped, empties dropped
"""
import json


def _clean_items(items):
    cleaned = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, str):
            item = item.strip()
            if not item:
                continue
        cleaned.append(item)
    return cleaned


def parse_list_field(value):
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        return _clean_items(value)

    if not isinstance(value, str):
        return _clean_items([str(value)])

    text = value.strip()
    if not text:
        return []

    if text.startswith('['):
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return _clean_items(parsed)

    return _clean_items(text.split(','))
