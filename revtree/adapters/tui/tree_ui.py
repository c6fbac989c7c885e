"""Main interactive tree UI controller.

Implements the full-screen revision tree using prompt_toolkit: a tree window
with a cursor, an optional diff preview pane, a status bar and a one-line
minibuffer for confirmations and text input. All VCS work runs on the
application's event loop through the orchestrator, so the UI keeps
repainting while commands are in flight.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from prompt_toolkit import Application
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI, to_formatted_text
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.layout import (
    ConditionalContainer,
    Dimension,
    HSplit,
    VSplit,
    Window,
)
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.styles import Style

from revtree.adapters.factory import TreeFactory
from revtree.core import navigation
from revtree.core.presentation.colors import RevtreeColors, render_diff_highlighted
from revtree.core.presentation.rows import RowFormatter
from revtree.core.session import TreeSession
from revtree.core.tree.sequence import Row
from revtree.domain.config import RevtreeConfig
from revtree.domain.entities import Node
from revtree.domain.exceptions import LaunchError, RevtreeDomainError
from revtree.ports.editor import Editor

KEY_HINTS = "j/k:move h/l:parent/child tab:toggle g:refresh d:diff q:quit"


class StatusBarProgress:
    """ProgressIndicator that shows the in-flight round in the status bar.

    Rounds can overlap (a refresh started while another is running), so the
    labels are kept as a stack and the newest one is shown.
    """

    def __init__(self, invalidate: Callable[[], None]) -> None:
        self.invalidate = invalidate
        self._labels: list[str] = []

    @property
    def label(self) -> str | None:
        return self._labels[-1] if self._labels else None

    def on_start(self, description: str) -> None:
        self._labels.append(description)
        self.invalidate()

    def on_complete(self) -> None:
        if self._labels:
            self._labels.pop()
        self.invalidate()


class RevisionTreeUI:
    """Interactive revision tree using prompt_toolkit."""

    def __init__(
        self,
        factory: TreeFactory,
        config: RevtreeConfig,
        editor: Editor,
    ):
        """Initialize the tree UI.

        Args:
            factory: Builds the engine, orchestrator and actions.
            config: Effective configuration (display settings).
            editor: Editor used by the open-file key.
        """
        self.config = config
        self.editor = editor

        self.app: Application[Any] | None = None
        self.progress = StatusBarProgress(self._invalidate)

        components = factory.create_components(progress=self.progress, confirm=self._confirm)
        self.engine = components.engine
        self.actions = components.actions

        self.session = TreeSession(engine=self.engine)
        self.formatter = RowFormatter(self.engine.depth, show_dates=config.display.show_dates)

        # Minibuffer state
        self._prompt_label: str | None = None
        self._prompt_future: asyncio.Future[str | None] | None = None

        # Preview task management
        self._preview_task: asyncio.Task | None = None
        self._preview_node: Node | None = None

        # Background tasks started from key bindings
        self._tasks: set[asyncio.Task[None]] = set()

        self.fatal_error: LaunchError | None = None

        self._build_ui()

    # -- layout ----------------------------------------------------------

    def _build_ui(self) -> None:
        """Build the prompt_toolkit UI layout."""
        self.minibuffer = Buffer(multiline=False, accept_handler=self._on_accept)

        kb = self._create_key_bindings()

        @Condition
        def preview_visible() -> bool:
            return self.session.preview_visible

        @Condition
        def prompting() -> bool:
            return self._prompt_label is not None

        self.tree_window = Window(
            content=FormattedTextControl(
                self._get_tree_text,
                focusable=True,
                show_cursor=False,
            ),
            wrap_lines=False,
        )

        preview_window = Window(
            content=FormattedTextControl(self._get_preview_text, focusable=False),
            wrap_lines=False,
            height=Dimension(weight=1),
        )

        status_window = Window(
            content=FormattedTextControl(self._get_status_text, focusable=False),
            height=Dimension.exact(1),
        )

        minibuffer_row = VSplit([
            Window(
                content=FormattedTextControl(
                    lambda: [("class:prompt", self._prompt_label or "")]
                ),
                dont_extend_width=True,
            ),
            Window(content=BufferControl(buffer=self.minibuffer), height=Dimension.exact(1)),
        ])

        main_container = HSplit([
            HSplit([self.tree_window], height=Dimension(weight=2)),
            ConditionalContainer(
                Window(height=Dimension.exact(1), char="─", style="class:separator"),
                filter=preview_visible,
            ),
            ConditionalContainer(preview_window, filter=preview_visible),
            Window(height=Dimension.exact(1), char="─", style="class:separator"),
            status_window,
            ConditionalContainer(minibuffer_row, filter=prompting),
        ])

        style = Style.from_dict(RevtreeColors.get_prompt_toolkit_style())

        self.app = Application(
            layout=Layout(main_container, focused_element=self.tree_window),
            key_bindings=kb,
            style=style,
            full_screen=True,
            mouse_support=False,
        )

    def _invalidate(self) -> None:
        if self.app is not None:
            self.app.invalidate()

    def _create_key_bindings(self) -> KeyBindings:
        """Create key bindings for the UI."""
        kb = KeyBindings()

        @Condition
        def tree_active() -> bool:
            return self._prompt_label is None

        @Condition
        def prompting() -> bool:
            return self._prompt_label is not None

        def bind_move(keys: tuple[str, ...], step: Callable[[Row], Row]) -> None:
            @kb.add(*keys, filter=tree_active)
            def _(event: KeyPressEvent) -> None:
                self.session.clear_message()
                self.session.move(step)
                self._cursor_changed()

        # Navigation
        for key in ("j", "down"):
            bind_move((key,), navigation.next_row)
        for key in ("k", "up"):
            bind_move((key,), navigation.prev_row)
        bind_move(("J",), navigation.next_same_level)
        bind_move(("K",), navigation.prev_same_level)
        for key in ("h", "left"):
            bind_move((key,), navigation.up)
        for key in ("l", "right"):
            bind_move((key,), navigation.down)

        # Tree structure
        @kb.add("tab", filter=tree_active)
        @kb.add("space", filter=tree_active)
        def toggle(event: KeyPressEvent) -> None:
            self._spawn(self.session.toggle())

        @kb.add("T", filter=tree_active)
        def force_toggle(event: KeyPressEvent) -> None:
            self._spawn(self.session.toggle(force_refetch=True))

        @kb.add("g", filter=tree_active)
        def refresh(event: KeyPressEvent) -> None:
            self._spawn(self.session.refresh())

        # Mutations on the selected node
        node_actions: dict[str, Callable[[Node], Awaitable[object]]] = {
            "u": self.actions.update,
            "r": self.actions.revert,
            "D": self.actions.duplicate,
            "x": self.actions.strip,
            "S": self.actions.unshelve,
            "X": self.actions.delete_shelve,
        }
        for key, action in node_actions.items():
            self._bind_node_action(kb, key, action, tree_active)

        @kb.add("U", filter=tree_active)
        def uncommit(event: KeyPressEvent) -> None:
            self._spawn(self._mutation(self.actions.uncommit))

        @kb.add("c", filter=tree_active)
        def commit(event: KeyPressEvent) -> None:
            self._spawn(self._commit())

        @kb.add("a", filter=tree_active)
        def amend(event: KeyPressEvent) -> None:
            self._spawn(self._amend())

        @kb.add("s", filter=tree_active)
        def shelve(event: KeyPressEvent) -> None:
            self._spawn(self._shelve())

        @kb.add("p", filter=tree_active)
        def show_phase(event: KeyPressEvent) -> None:
            self._spawn(self._show_phase())

        @kb.add("P", filter=tree_active)
        def set_phase(event: KeyPressEvent) -> None:
            self._spawn(self._set_phase())

        # Views
        @kb.add("d", filter=tree_active)
        def toggle_preview(event: KeyPressEvent) -> None:
            self.session.toggle_preview()
            self._preview_node = None
            self._cursor_changed()

        @kb.add("o", filter=tree_active)
        def open_in_editor(event: KeyPressEvent) -> None:
            self._spawn(self._open_in_editor())

        # Minibuffer
        @kb.add("enter", filter=prompting)
        def accept(event: KeyPressEvent) -> None:
            self.minibuffer.validate_and_handle()

        @kb.add("escape", filter=prompting)
        @kb.add("c-g", filter=prompting)
        def cancel(event: KeyPressEvent) -> None:
            self._resolve_prompt(None)

        # Exit
        @kb.add("q", filter=tree_active)
        @kb.add("c-c")
        def exit_app(event: KeyPressEvent) -> None:
            event.app.exit()

        return kb

    def _bind_node_action(
        self,
        kb: KeyBindings,
        key: str,
        action: Callable[[Node], Awaitable[object]],
        active: Condition,
    ) -> None:
        @kb.add(key, filter=active)
        def _(event: KeyPressEvent) -> None:
            node = self.session.selected
            if node is not None:
                self._spawn(self._mutation(lambda: action(node)))

    # -- task plumbing ---------------------------------------------------

    def _spawn(self, coro: Awaitable[object]) -> asyncio.Task[None]:
        """Run ``coro`` in the background, holding on to its task until done."""
        task = asyncio.ensure_future(self._guard(coro))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guard(self, coro: Awaitable[object]) -> None:
        """Run a UI task, turning failures into status messages.

        A launch failure is fatal: the application exits and the error is
        re-raised by :meth:`run`.
        """
        try:
            await coro
        except LaunchError as e:
            self.fatal_error = e
            if self.app is not None and self.app.is_running:
                self.app.exit()
        except RevtreeDomainError as e:
            self.session.set_message(e.message, error=True)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error_msg = str(e) if str(e) else type(e).__name__
            self.session.set_message(f"Error: {error_msg}", error=True)
        finally:
            self.session.ensure_cursor()
            self._cursor_changed()

    async def _mutation(self, run: Callable[[], Awaitable[object]]) -> None:
        """Run an action that rebuilds the tree, keeping the cursor's node."""
        self.session.clear_message()
        key = self.session.remember()
        await run()
        self.session.restore(key)

    # -- minibuffer ------------------------------------------------------

    def _on_accept(self, buffer: Buffer) -> bool:
        self._resolve_prompt(buffer.text)
        return False

    def _resolve_prompt(self, value: str | None) -> None:
        future = self._prompt_future
        if future is not None and not future.done():
            future.set_result(value)

    async def _ask(self, label: str, default: str = "") -> str | None:
        """Read one line in the minibuffer; None if cancelled."""
        if self._prompt_future is not None:
            return None
        self._prompt_future = asyncio.get_running_loop().create_future()
        self._prompt_label = label
        self.minibuffer.text = default
        self.minibuffer.cursor_position = len(default)
        if self.app is not None:
            self.app.layout.focus(self.minibuffer)
        self._invalidate()
        try:
            return await self._prompt_future
        finally:
            self._prompt_future = None
            self._prompt_label = None
            self.minibuffer.reset()
            if self.app is not None:
                self.app.layout.focus(self.tree_window)
            self._invalidate()

    async def _confirm(self, prompt: str) -> bool:
        answer = await self._ask(f"{prompt} [y/N] ")
        return answer is not None and answer.strip().lower() in ("y", "yes")

    # -- prompted actions ------------------------------------------------

    async def _commit(self) -> None:
        message = await self._ask("Commit message: ")
        if message is None:
            return
        await self._mutation(lambda: self.actions.commit(message))

    async def _amend(self) -> None:
        message = await self._ask("Amend message (empty keeps the current one): ")
        if message is None:
            return
        await self._mutation(lambda: self.actions.amend(message.strip() or None))

    async def _shelve(self) -> None:
        node = self.session.selected
        if node is None:
            return
        name = await self._ask("Shelve name (empty for default): ")
        if name is None:
            return
        await self._mutation(lambda: self.actions.shelve(node, name.strip() or None))

    async def _show_phase(self) -> None:
        node = self.session.selected
        if node is None:
            return
        phase = await self.actions.get_phase(node)
        self.session.set_message(f"Phase: {phase}" if phase else "Phase unknown")

    async def _set_phase(self) -> None:
        node = self.session.selected
        if node is None:
            return
        phase = await self._ask("New phase (public/draft/secret): ")
        if phase is None:
            return
        await self._mutation(lambda: self.actions.set_phase(node, phase))

    async def _open_in_editor(self) -> None:
        node = self.session.selected
        if node is None:
            return
        path, line = self.actions.editor_target(node)
        await run_in_terminal(lambda: self._run_editor(path, line))
        await self._mutation(self.engine.rebuild)

    def _run_editor(self, path: Path, line: int) -> None:
        self.editor.open_file(path, line)

    # -- preview ---------------------------------------------------------

    def _cursor_changed(self) -> None:
        """Refresh the preview for the new cursor node if it is shown."""
        self._invalidate()
        if not self.session.preview_visible:
            return
        node = self.session.selected
        if node is self._preview_node:
            return
        self._preview_node = node
        if self._preview_task is not None and not self._preview_task.done():
            self._preview_task.cancel()
        if node is None:
            self.session.preview_text = None
            return
        self._preview_task = asyncio.ensure_future(self._load_preview(node))

    async def _load_preview(self, node: Node) -> None:
        try:
            text = await self.actions.diff_text(node)
        except asyncio.CancelledError:
            return
        except LaunchError as e:
            self.fatal_error = e
            if self.app is not None and self.app.is_running:
                self.app.exit()
            return
        except RevtreeDomainError as e:
            text = e.message
        if node is self._preview_node:
            self.session.preview_text = text
            self._invalidate()

    # -- rendering -------------------------------------------------------

    def _get_tree_text(self) -> list[tuple[str, str]]:
        rows = self.session.rows()
        if not rows or all(row.is_separator for row in rows):
            if self.progress.label:
                return [("class:dimmed", "Loading...")]
            return [("class:dimmed", "Nothing to show")]
        return self.formatter.render(rows, self.session.cursor)

    def _get_preview_text(self) -> list[tuple[str, str]]:
        text = self.session.preview_text
        if not text:
            return [("class:dimmed", "No diff")]

        if self.config.display.syntax_highlighting:
            try:
                highlighted = render_diff_highlighted(text, theme=self.config.display.theme)
                return to_formatted_text(ANSI(highlighted))
            except Exception:
                # Fall back to plain text if highlighting fails
                pass

        return [("", text)]

    def _get_status_text(self) -> list[tuple[str, str]]:
        parts: list[tuple[str, str]] = []
        if self.progress.label:
            parts.append(("class:status", f" {self.progress.label}..."))
        elif self.session.message:
            style = "class:error" if self.session.message_is_error else "class:status"
            parts.append((style, f" {self.session.message}"))
        else:
            count = len(self.engine.changesets)
            parts.append(("class:status", f" {count} changesets"))

        parts.append(("class:dimmed", " │ "))
        parts.append(("class:dimmed", KEY_HINTS))
        return parts

    # -- running ---------------------------------------------------------

    async def run_async(self) -> None:
        """Run the interactive tree UI asynchronously."""
        assert self.app is not None

        def start() -> None:
            self._spawn(self.session.refresh())

        await self.app.run_async(pre_run=start)

    def run(self) -> None:
        """Run the interactive tree UI.

        Suppresses all logging output during TUI execution to prevent display
        corruption, then restores original logging state after exit.

        Raises:
            LaunchError: If hg or patch could not be started.
        """
        # prompt_toolkit runs in full-screen mode, so any stderr output
        # (including logging) will corrupt the UI
        logging.disable(logging.CRITICAL)
        try:
            asyncio.run(self.run_async())
        finally:
            logging.disable(logging.NOTSET)

        if self.fatal_error is not None:
            raise self.fatal_error
