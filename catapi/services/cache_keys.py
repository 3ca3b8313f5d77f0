"""Cache key layout shared by the tag resolver and the tag listing service."""

ALL_TAGS_CACHE_KEY = "tags:all"
DEFAULT_TAG_TTL_SECONDS = 600


def tag_cache_key(name: str) -> str:
    """Key under which a single tag is cached, e.g. ``tag:Playful``."""
    return f"tag:{name}"
