import re
from dataclasses import dataclass
from enum import Enum

try:
    from backend.app.services.errors import InvalidInputError
except ModuleNotFoundError:
    from app.services.errors import InvalidInputError

CHANNEL_URL_MARKER = "youtube.com/channel/"
CHANNEL_URL_ID_RE = re.compile(re.escape(CHANNEL_URL_MARKER) + r"(UC[A-Za-z0-9_-]{22})")


class HintKind(str, Enum):
    EXPLICIT_ID = "explicit_id"
    URL_EMBEDDED_ID = "url_embedded_id"
    HANDLE = "handle"
    FREEFORM_QUERY = "freeform_query"


@dataclass(frozen=True)
class IdentifierHint:
    kind: HintKind
    value: str

    @property
    def channel_id(self) -> str | None:
        if self.kind in (HintKind.EXPLICIT_ID, HintKind.URL_EMBEDDED_ID):
            return self.value
        return None


def classify(raw: str | None) -> IdentifierHint:
    """
    Map user input to the shape that decides the cheapest lookup path.

    Priority: explicit UC... id, /channel/ URL, @handle, free text.
    A /channel/ URL without a well-formed id falls through to the later rules.
    """
    if raw is None or not raw.strip():
        raise InvalidInputError("A channel handle, name, URL or ID is required.")

    if raw.startswith("UC") and len(raw) > 20:
        return IdentifierHint(HintKind.EXPLICIT_ID, raw)

    if CHANNEL_URL_MARKER in raw:
        m = CHANNEL_URL_ID_RE.search(raw)
        if m:
            return IdentifierHint(HintKind.URL_EMBEDDED_ID, m.group(1))

    if raw.startswith("@"):
        return IdentifierHint(HintKind.HANDLE, raw)

    return IdentifierHint(HintKind.FREEFORM_QUERY, raw)
