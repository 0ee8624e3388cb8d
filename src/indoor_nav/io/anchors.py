# indoor_nav/io/anchors.py
import json


def _looks_like_node_id(text: str) -> bool:
    # generated ids are "n###" or uuids
    return text.startswith("n") or "-" in text


def parse_anchor_payload(raw: str | bytes | None) -> str | None:
    """
    Node id carried by a decoded anchor marker.

    Printed markers hold a JSON object with a string "node_id"; older ones hold the bare id.
    Valid JSON in any other shape is someone else's code and is ignored (None).
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    text = raw.strip()
    if not text:
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return text if _looks_like_node_id(text) else None
    if isinstance(parsed, dict):
        node_id = parsed.get("node_id")
        if isinstance(node_id, str) and node_id:
            return node_id
    return None
