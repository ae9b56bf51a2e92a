"""User-facing description of the lgtm commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from lgtm_core.config import skip_collaborators


@dataclass(frozen=True)
class CommandHelp:
    usage: str
    description: str
    who_can_use: str
    examples: tuple[str, ...] = field(default_factory=tuple)
    featured: bool = False


@dataclass(frozen=True)
class PluginHelp:
    description: str
    commands: tuple[CommandHelp, ...] = field(default_factory=tuple)


_DESCRIPTION = (
    "The lgtm plugin manages the application and removal of the 'lgtm' (Looks Good To Me) label "
    "which is typically used to gate merging."
)


def plugin_help(config: dict | None = None, repo: str | None = None) -> PluginHelp:
    """Describe the /lgtm commands, optionally for one owner/name repository.

    Who may use the commands depends on whether the repository authorizes
    through assignment or through OWNERS files.
    """
    who = "Collaborators on the repository. '/lgtm cancel' can be used additionally by the PR author."
    if config is not None and repo and "/" in repo:
        org, name = repo.split("/", 1)
        if skip_collaborators(config, org, name):
            who = (
                "Approvers and reviewers listed in OWNERS files covering the changed files. "
                "'/lgtm cancel' can be used additionally by the PR author."
            )
    return PluginHelp(
        description=_DESCRIPTION,
        commands=(
            CommandHelp(
                usage="/lgtm [cancel]",
                description="Adds or removes the 'lgtm' label which is typically used to gate merging.",
                who_can_use=who,
                examples=("/lgtm", "/lgtm cancel"),
                featured=True,
            ),
        ),
    )
