"""
Taste-graph entity type identifiers.

These URNs are sent verbatim as `filter.type` / `types` values and must match
the upstream service exactly.
"""

ARTIST = "urn:entity:artist"
BOOK = "urn:entity:book"
BRAND = "urn:entity:brand"
DESTINATION = "urn:entity:destination"
MOVIE = "urn:entity:movie"
PERSON = "urn:entity:person"
PLACE = "urn:entity:place"
PODCAST = "urn:entity:podcast"
TV_SHOW = "urn:entity:tv_show"
VIDEO_GAME = "urn:entity:video_game"

ENTITY_TYPES: dict[str, str] = {
    "ARTIST": ARTIST,
    "BOOK": BOOK,
    "BRAND": BRAND,
    "DESTINATION": DESTINATION,
    "MOVIE": MOVIE,
    "PERSON": PERSON,
    "PLACE": PLACE,
    "PODCAST": PODCAST,
    "TV_SHOW": TV_SHOW,
    "VIDEO_GAME": VIDEO_GAME,
}

# Tags share the search index with entities but live under their own namespace
TAG_PREFIX = "urn:tag"


def is_tag_type(entity_type: str | None) -> bool:
    return bool(entity_type) and entity_type.startswith(TAG_PREFIX)
