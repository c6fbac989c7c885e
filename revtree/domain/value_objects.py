"""Domain value objects with validation.

Value objects that provide validation at construction time,
ensuring invalid states are unrepresentable.
"""

import re
from dataclasses import dataclass

# Mercurial prints the null revision as a run of zeros (short or full form)
_NULL_REVISION_RE = re.compile(r"^0+$")

PHASES: tuple[str, ...] = ("public", "draft", "secret")


def is_null_revision(value: str) -> bool:
    """Check whether a revision string is the VCS null-revision sentinel.

    Args:
        value: Revision string as printed by the VCS.

    Returns:
        True if the value consists only of zeros.
    """
    return bool(_NULL_REVISION_RE.match(value))


@dataclass(frozen=True)
class CommandSpec:
    """One external invocation: an executable and its arguments.

    Attributes:
        command: Executable name or path (e.g., "hg").
        args: Arguments passed to the executable, in order.

    Raises:
        ValueError: If command is empty.
    """

    command: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate the command name and freeze the argument list."""
        if not self.command:
            raise ValueError("CommandSpec command cannot be empty")
        # Callers commonly pass lists; store an immutable copy
        object.__setattr__(self, "args", tuple(self.args))

    def argv(self) -> list[str]:
        """Return the full argument vector, executable first."""
        return [self.command, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv())


@dataclass(frozen=True)
class Phase:
    """Validated changeset phase name.

    Attributes:
        name: One of "public", "draft", "secret".

    Raises:
        ValueError: If name is not a known phase.
    """

    name: str

    def __post_init__(self) -> None:
        """Validate phase name."""
        if self.name not in PHASES:
            raise ValueError(
                f"Unknown phase '{self.name}'. Valid phases: {', '.join(PHASES)}"
            )

    def __str__(self) -> str:
        return self.name
