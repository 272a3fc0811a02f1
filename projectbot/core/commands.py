"""Pure function-based parser for the ``/project`` slash command text."""

from dataclasses import dataclass

# First-token actions understood by /project
LIST = "list"
VIEW = "view"
EDIT = "edit"
DELETE = "delete"
CREATE = "create"
NEW = "new"
HELP = "help"

ACTIONS = frozenset({LIST, VIEW, EDIT, DELETE, CREATE, NEW, HELP})


@dataclass
class ProjectCommand:
    """Represents a parsed /project invocation.

    Attributes:
        action: One of ACTIONS (lowercase normalized).
        search_term: Free text after the action (whitespace normalized).
    """

    action: str
    search_term: str = ""


def parse_project_command(text: str | None) -> ProjectCommand:
    """Parse the text that followed ``/project``.

    The first whitespace-separated token selects the action; the rest is a
    search term. Empty or unrecognized first tokens fall back to ``list``
    with the whole text used as the search term.

    Args:
        text: Raw command text (may be empty or None).

    Returns:
        ProjectCommand with action and search_term.

    Examples:
        >>> parse_project_command("edit  mint app")
        ProjectCommand(action='edit', search_term='mint app')

        >>> parse_project_command("")
        ProjectCommand(action='list', search_term='')

        >>> parse_project_command("mortgage")
        ProjectCommand(action='list', search_term='mortgage')
    """
    parts = (text or "").split()

    if not parts:
        return ProjectCommand(action=LIST)

    action = parts[0].lower()
    if action not in ACTIONS:
        return ProjectCommand(action=LIST, search_term=" ".join(parts))

    return ProjectCommand(action=action, search_term=" ".join(parts[1:]))
