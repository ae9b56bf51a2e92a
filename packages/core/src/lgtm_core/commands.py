"""Recognition of the /lgtm slash commands inside a comment body."""

from __future__ import annotations

import re
from enum import Enum

LGTM_LABEL = "lgtm"

# Posted by the synchronize handler and matched verbatim during cleanup, so it
# must never be passed through format_response().
REMOVE_LGTM_LABEL_NOTIFICATION = "New changes are detected. LGTM label has been removed."

_LGTM_RE = re.compile(r"^/lgtm(?: no-issue)?\s*$", re.IGNORECASE | re.MULTILINE)
_LGTM_CANCEL_RE = re.compile(r"^/lgtm cancel\s*$", re.IGNORECASE | re.MULTILINE)


class Command(str, Enum):
    APPROVE = "approve"
    CANCEL = "cancel"
    NONE = "none"


def classify(body: str | None) -> Command:
    """Return the command a comment body carries.

    Commands must sit on a line of their own; trailing whitespace is allowed.
    When a body holds both an approve and a cancel line, approve wins.
    """
    text = body or ""
    if _LGTM_RE.search(text):
        return Command.APPROVE
    if _LGTM_CANCEL_RE.search(text):
        return Command.CANCEL
    return Command.NONE
