"""Pytest configuration and shared fixtures."""

import asyncio
import shutil
from pathlib import Path

import pytest

from revtree.adapters.hg_cmd.commands import HgCommands
from revtree.core.orchestrator import Orchestrator
from revtree.core.tree.engine import TreeEngine
from revtree.domain.value_objects import CommandSpec

# ============================================================================
# Sample VCS output
# ============================================================================
# One small history: TIP -> MID -> ROOT, working copy on MID with two pending
# files, and one shelve.

TIP = "3f2a9c1b7d4e"
MID = "9b8c7d6e5f40"
ROOT = "1234567890ab"
NULL = "000000000000"

LOG_TEXT = f"""\
changeset: {TIP}
summary: add feature
date: 2024-03-02 10:00 +0000
user: alice
branch: default
phase: draft
parent: {MID}
parent: {NULL}
tag: tip

changeset: {MID}
summary: fix bug
date: 2024-03-01 09:00 +0000
user: bob
branch: default
phase: public
parent: {ROOT}
parent: {NULL}

changeset: {ROOT}
summary: initial import
date: 2024-02-28 08:00 +0000
user: alice
branch: default
phase: public
parent: {NULL}
parent: {NULL}

"""

PENDING_STATUS = "M foo.txt\n? bar.txt\n"
PARENT_STATUS = "M a.txt\n"
CURRENT_PARENT = f"{MID}\n"
SHELVE_LIST = "wip             (2m ago)    changes to foo\n"

FOO_DIFF = """\
diff --git a/foo.txt b/foo.txt
--- a/foo.txt
+++ b/foo.txt
@@ -1,3 +1,3 @@
 one
-two
+TWO
 three
@@ -10,2 +10,3 @@
 ten
+ten and a half
 eleven
"""

SHELVE_PATCH = """\
wip             (2m ago)    changes to foo

diff --git a/foo.txt b/foo.txt
--- a/foo.txt
+++ b/foo.txt
@@ -1,1 +1,1 @@
-one
+ONE
diff --git a/new.txt b/new.txt
new file mode 100644
--- /dev/null
+++ b/new.txt
@@ -0,0 +1,1 @@
+hello
"""


# ============================================================================
# Fake process runner
# ============================================================================


class FakeRunner:
    """In-memory ProcessRunner that answers from a table and records calls.

    Unknown commands return ``default``, like a VCS printing nothing.
    """

    def __init__(self, default: str = "") -> None:
        self.responses: dict[tuple[str, ...], str] = {}
        self.calls: list[tuple[str, ...]] = []
        self.default = default

    def add(self, spec: CommandSpec, output: str) -> None:
        self.responses[tuple(spec.argv())] = output

    def count(self, spec: CommandSpec) -> int:
        return self.calls.count(tuple(spec.argv()))

    async def run(self, command: str, args: list[str], cwd: Path) -> str:
        argv = (command, *args)
        self.calls.append(argv)
        # Yield like a real process wait
        await asyncio.sleep(0)
        return self.responses.get(argv, self.default)


class RecordingProgress:
    """ProgressIndicator that records every start/complete event."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def on_start(self, description: str) -> None:
        self.events.append(f"start:{description}")

    def on_complete(self) -> None:
        self.events.append("complete")


def load_sample_repo(runner: FakeRunner, commands: HgCommands) -> None:
    """Register the sample history's responses on a fake runner."""
    runner.add(commands.log(), LOG_TEXT)
    runner.add(commands.status(), PENDING_STATUS)
    runner.add(commands.status_change("."), PARENT_STATUS)
    runner.add(commands.current_parent(), CURRENT_PARENT)
    runner.add(commands.shelve_list(), SHELVE_LIST)
    runner.add(commands.diff("foo.txt", None), FOO_DIFF)
    runner.add(commands.shelve_diff("wip"), SHELVE_PATCH)
    runner.add(commands.status_change(TIP), "A feature.py\n")
    runner.add(commands.status_change(ROOT), "A a.txt\nA foo.txt\n")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def commands() -> HgCommands:
    """Command builder with default settings."""
    return HgCommands()


@pytest.fixture
def fake_runner(commands: HgCommands) -> FakeRunner:
    """Fake runner preloaded with the sample repository."""
    runner = FakeRunner()
    load_sample_repo(runner, commands)
    return runner


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def orchestrator(fake_runner: FakeRunner, progress: RecordingProgress, tmp_path: Path) -> Orchestrator:
    return Orchestrator(fake_runner, tmp_path, progress=progress)


@pytest.fixture
def engine(orchestrator: Orchestrator, commands: HgCommands) -> TreeEngine:
    """Engine populated from the sample repository."""
    tree = TreeEngine(orchestrator, commands)
    asyncio.run(tree.rebuild())
    return tree


@pytest.fixture
def hg_repo(tmp_path: Path) -> Path:
    """Directory that looks like a Mercurial repository root."""
    (tmp_path / ".hg").mkdir()
    return tmp_path


requires_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")
requires_patch = pytest.mark.skipif(
    shutil.which("patch") is None, reason="patch not available"
)
requires_hg = pytest.mark.skipif(shutil.which("hg") is None, reason="hg not available")
