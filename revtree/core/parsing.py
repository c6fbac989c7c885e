"""Output parsing: raw VCS text to entity records.

Stateless functions, one per query shape (log, status, diff, shelve list,
shelve patch). The VCS's exit status is never checked, so any text can
arrive here, including error messages: lines that do not match the expected
shape are skipped, never raised on.
"""

import logging
import re

from revtree.domain.entities import HUNK_HEADER_RE, Changeset, ChangedFile, Hunk, Shelve
from revtree.domain.value_objects import PHASES, is_null_revision

logger = logging.getLogger(__name__)

# CSI sequences (colors, cursor movement) and OSC sequences (hyperlinks)
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")

# Optional graph-log prefix ("o  ", "@  ", "| o  ") followed by "key: value"
_FIELD_RE = re.compile(
    r"^\s*(?:[|@o*x+/\\:.\-_]+\s+)*(?P<key>[A-Za-z][\w-]*):[ \t]?(?P<value>.*)$"
)
_STATUS_RE = re.compile(r"^(?P<status>\S) (?P<path>.+)$")
_SHELVE_RE = re.compile(r"^(?P<name>\S+)\s+\((?P<age>[^)]*)\)\s*(?P<message>.*)$")
_GIT_HEADER_RE = re.compile(r"^diff --git a/(?P<a>.+?) b/(?P<b>.+)$")
_REVISION_ID_RE = re.compile(r"^(?:\d+:)?(?P<rev>[0-9a-f]{6,40})$")
_PHASE_RE = re.compile(r":\s*(?P<phase>\w+)\s*$")

# Log fields whose values are revision ids (subject to null-revision folding)
REVISION_FIELDS = frozenset({"changeset", "parent"})

HUNK_MARKER = "@@"
FILE_SEPARATOR = "diff "


def strip_ansi(text: str) -> str:
    """Remove terminal escape sequences from text."""
    return _ANSI_RE.sub("", text)


def output_lines(text: str) -> list[str]:
    """Split command output into lines on ``\\n`` only, without ANSI escapes.

    Form feeds and the other separators ``str.splitlines`` honors are kept
    as line content. A trailing ``\\r`` is dropped from every line.
    """
    lines = strip_ansi(text).split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


def _short_revision(value: str) -> str:
    """Reduce ``rev:hash`` (hg's default log format) to the hash."""
    return value.rsplit(":", 1)[-1].strip()


def _build_changeset(fields: dict[str, list[str]]) -> Changeset | None:
    revs = fields.get("changeset")
    if not revs:
        logger.debug("Skipping changeset block without a usable revision id")
        return None
    summaries = fields.get("summary") or [""]
    return Changeset(
        rev=revs[0],
        summary=summaries[0],
        tags=list(fields.get("tag", [])),
        fields=fields,
    )


def parse_changesets(text: str) -> list[Changeset]:
    """Parse log output into changesets, preserving source order.

    A block starts at each ``changeset:`` line; every following
    ``key: value`` line belongs to it until the next ``changeset:`` line.
    Repeated keys accumulate in order. Null revisions are dropped. Text
    before the first ``changeset:`` line is ignored, as are graph-log
    prefixes.

    Args:
        text: Raw log output.

    Returns:
        Changesets in the order they appear in ``text``.
    """
    changesets: list[Changeset] = []
    fields: dict[str, list[str]] | None = None

    for raw_line in output_lines(text):
        match = _FIELD_RE.match(raw_line)
        if match is None:
            continue
        key = match.group("key")
        value = match.group("value").strip()

        if key == "changeset":
            if fields is not None:
                changeset = _build_changeset(fields)
                if changeset is not None:
                    changesets.append(changeset)
            fields = {}
        elif fields is None:
            # Preamble before the first record
            continue

        if key in REVISION_FIELDS:
            value = _short_revision(value)
            if not value or is_null_revision(value):
                continue

        fields.setdefault(key, []).append(value)

    if fields is not None:
        changeset = _build_changeset(fields)
        if changeset is not None:
            changesets.append(changeset)

    return changesets


def parse_status_files(
    owner: Changeset, text: str, revision: str | None
) -> list[ChangedFile]:
    """Parse ``<status-char> <path>`` lines into files owned by ``owner``.

    Args:
        owner: Changeset the files belong to.
        text: Raw status output, possibly ANSI-colored.
        revision: Revision the files' diffs are taken against, or ``None``
            for the working copy.

    Returns:
        Files in source order.
    """
    files: list[ChangedFile] = []
    for raw_line in output_lines(text):
        match = _STATUS_RE.match(raw_line)
        if match is None:
            if raw_line.strip():
                logger.debug("Skipping unrecognized status line: %r", raw_line)
            continue
        files.append(
            ChangedFile(
                path=match.group("path"),
                status=match.group("status"),
                revision=revision,
                parent_node=owner.node_id,
            )
        )
    return files


def _split_hunks(lines: list[str]) -> tuple[list[str], list[list[str]]]:
    """Split diff lines at hunk headers.

    Returns:
        ``(preamble, hunks)`` where preamble holds the lines before the first
        header and each hunk starts with its ``@@`` header line.
    """
    preamble: list[str] = []
    hunks: list[list[str]] = []
    for line in lines:
        if line.startswith(HUNK_MARKER):
            hunks.append([line])
        elif hunks:
            hunks[-1].append(line)
        else:
            preamble.append(line)
    return preamble, hunks


def parse_diff(text: str) -> list[Hunk]:
    """Parse a single-file unified diff into hunks.

    Args:
        text: Raw diff output.

    Returns:
        One Hunk per ``@@`` header, each starting with its header line.
    """
    _preamble, hunks = _split_hunks(output_lines(text))
    for lines in hunks:
        if HUNK_HEADER_RE.match(lines[0]) is None:
            logger.debug("Hunk header without line ranges: %r", lines[0])
    return [Hunk(lines=lines) for lines in hunks]


def diff_preamble(text: str) -> list[str]:
    """Return the file-header lines preceding the first hunk of a diff."""
    preamble, _hunks = _split_hunks(output_lines(text))
    return [line for line in preamble if line]


def parse_shelve_list(text: str) -> list[Shelve]:
    """Parse ``<name> (<age>) <message>`` lines into shelves.

    Malformed lines are skipped.
    """
    shelves: list[Shelve] = []
    for raw_line in output_lines(text):
        match = _SHELVE_RE.match(raw_line.strip())
        if match is None:
            if raw_line.strip():
                logger.debug("Skipping unrecognized shelve line: %r", raw_line)
            continue
        shelves.append(
            Shelve(
                name=match.group("name"),
                age=match.group("age").strip(),
                message=match.group("message").strip(),
            )
        )
    return shelves


def _file_path(preamble: list[str]) -> str | None:
    for line in preamble:
        match = _GIT_HEADER_RE.match(line)
        if match is not None:
            return match.group("b")
    for prefix in ("+++ b/", "--- a/"):
        for line in preamble:
            if line.startswith(prefix):
                return line[len(prefix):].split("\t", 1)[0]
    return None


def _file_status(preamble: list[str]) -> str:
    for line in preamble:
        if line.startswith("new file mode") or line.startswith("--- /dev/null"):
            return "A"
        if line.startswith("deleted file mode") or line.startswith("+++ /dev/null"):
            return "R"
    return "M"


def parse_shelve_diff(text: str) -> list[ChangedFile]:
    """Parse a shelve's patch into files with their hunks already attached.

    The text is split on the per-file ``diff`` separator; the path comes
    from the ``a/``/``b/`` file header of each fragment, and each fragment
    is split into hunks like :func:`parse_diff`.

    Args:
        text: Raw shelve patch output.

    Returns:
        Files in patch order, each with ``hunks`` populated.
    """
    fragments: list[list[str]] = []
    for line in output_lines(text):
        if line.startswith(FILE_SEPARATOR):
            fragments.append([line])
        elif fragments:
            fragments[-1].append(line)

    files: list[ChangedFile] = []
    for fragment in fragments:
        preamble, hunk_lines = _split_hunks(fragment)
        path = _file_path(preamble)
        if path is None:
            logger.debug("Skipping shelve fragment without a file header: %r", fragment[0])
            continue
        files.append(
            ChangedFile(
                path=path,
                status=_file_status(preamble),
                hunks=[Hunk(lines=lines) for lines in hunk_lines],
                preamble=[line for line in preamble if line],
            )
        )
    return files


def parse_revision_ids(text: str) -> list[str]:
    """Parse one revision id per line, dropping null revisions and noise."""
    revs: list[str] = []
    for raw_line in output_lines(text):
        match = _REVISION_ID_RE.match(raw_line.strip())
        if match is None:
            continue
        rev = match.group("rev")
        if not is_null_revision(rev):
            revs.append(rev)
    return revs


def parse_phase(text: str) -> str | None:
    """Parse ``<rev>: <phase>`` output; returns None if no phase is found."""
    for raw_line in output_lines(text):
        match = _PHASE_RE.search(raw_line)
        if match is not None and match.group("phase") in PHASES:
            return match.group("phase")
    return None
