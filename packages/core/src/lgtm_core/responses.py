"""Formatting of bot replies to a triggering comment."""

from __future__ import annotations

DEFAULT_ABOUT = (
    "Instructions for interacting with me using PR comments are available by running `prlgtm help`. "
    "If you have questions or suggestions related to my behavior, please open an issue in this repository."
)


def quote(body: str) -> str:
    """Prefix every line of body with a markdown quote marker."""
    return "\n".join(">" + line for line in (body or "").split("\n"))


def format_response(body: str, html_url: str, login: str, reply: str, about: str = DEFAULT_ABOUT) -> str:
    """Build a reply that mentions the commenter and quotes the triggering comment.

    The quoted comment and the about text are folded into a <details> block so
    the visible part of the reply is only the mention and the message.
    """
    reason = f"In response to [this]({html_url}):\n\n{quote(body)}\n"
    return f"@{login}: {reply}\n\n<details>\n\n{reason}\n\n{about}\n</details>"
