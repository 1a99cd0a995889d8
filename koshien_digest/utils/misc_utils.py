# koshien_digest/utils/misc_utils.py
from typing import Any, Iterable, Mapping, Optional

# Prefix of the callback-wrapped payloads served by the game list feed
GAMELIST_CALLBACK_PREFIX = "koya_vk_chihou_gamelist("
CALLBACK_SUFFIX_LENGTH = len(");")


def strip_callback_wrapper(text: str, prefix: str = GAMELIST_CALLBACK_PREFIX) -> str:
    """Removes a `prefix(...);` envelope from `text` if it starts with `prefix`.

    Only the single known prefix is recognised; anything else is returned
    untouched and left for the JSON parser to accept or reject.
    """
    body = text.strip()
    if body.startswith(prefix):
        return body[len(prefix) : -CALLBACK_SUFFIX_LENGTH]
    return text


def first_non_empty(raw: Mapping[str, Any], keys: Iterable[str]) -> Optional[Any]:
    """Returns the value of the first key in `keys` whose value is non-empty."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def to_display_str(value: Any) -> str:
    """Stringify a feed value; None becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
