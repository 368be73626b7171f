"""Avatar URL generation."""

from urllib.parse import quote

DICEBEAR_BASE_URL = "https://api.dicebear.com/9.x/personas/svg"


def avatar_url(avatar_type: str, avatar_value: str) -> str:
    if avatar_type == "custom":
        return avatar_value
    return f"{DICEBEAR_BASE_URL}?seed={quote(avatar_value, safe='')}"
