"""Executable Textual app that hosts the edit engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use edit_engine.adapters.textual.app"
    ) from exc

from edit_engine.buffer import DocumentSnapshot, NEWLINE
from edit_engine.editor import Editor
from edit_engine.input.keyboard import KeyboardController
from edit_engine.runtime import telemetry
from edit_engine.runtime.config import EngineConfig
from edit_engine.search import Match

from .controller import TextualEditorAdapter, TextualUIHooks

CURSOR_STYLE = "reverse"
SELECTION_STYLE = "on blue"
MATCH_STYLE = "black on yellow"

_HOST_KEYS = frozenset({"ctrl+q", "ctrl+s", "ctrl+f"})
_NAMED_KEYS = {
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "tab": "TAB",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
}


def create_default_controller(
    text: str = "",
    *,
    name: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> KeyboardController:
    """Build an Editor on the polled monotonic clock plus the default keymap."""

    editor = Editor(text, name=name, config=config)
    return KeyboardController(editor)


def render_snapshot(
    snapshot: DocumentSnapshot, matches: Iterable[Match] = ()
) -> Text:
    """Render the document with the cursor, selection and search matches styled."""

    lines = snapshot.lines
    selected = snapshot.selection.normalized() if snapshot.selection else None
    by_line: dict[int, list[Match]] = {}
    for match in matches:
        by_line.setdefault(match.line, []).append(match)

    rendered = Text()
    offset = 0
    for line_index, line in enumerate(lines):
        # Trailing space gives the cursor a cell to sit on at end of line.
        rendered.append(line + " ")
        for match in by_line.get(line_index, ()):
            rendered.stylize(MATCH_STYLE, offset + match.start, offset + match.end)
        if selected is not None and selected.start.line <= line_index <= selected.end.line:
            start = selected.start.ch if line_index == selected.start.line else 0
            end = selected.end.ch if line_index == selected.end.line else len(line) + 1
            if end > start:
                rendered.stylize(SELECTION_STYLE, offset + start, offset + end)
        if line_index == snapshot.cursor.line:
            cursor = offset + snapshot.cursor.ch
            rendered.stylize(CURSOR_STYLE, cursor, cursor + 1)
        if line_index < len(lines) - 1:
            rendered.append(NEWLINE)
        offset = len(rendered.plain)
    return rendered


def normalize_key(
    event: events.Key,
) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
    """Map a Textual key event onto ``(key, text, modifiers)``.

    Returns ``None`` for keys the host app handles itself.
    """

    key = event.key
    if key in _HOST_KEYS:
        return None
    parts = key.split("+")
    base = parts[-1]
    modifiers = tuple(part for part in parts[:-1] if part in {"ctrl", "shift", "alt", "meta"})
    blocking = {"ctrl", "alt", "meta"}.intersection(modifiers)
    if base in _NAMED_KEYS:
        return (_NAMED_KEYS[base], None, modifiers)
    if event.is_printable and event.character and not blocking:
        text_modifiers = tuple(mod for mod in modifiers if mod != "shift")
        return (event.character, event.character, text_modifiers)
    if len(base) == 1:
        return (base.lower(), None, modifiers)
    return (base.upper(), None, modifiers)


@dataclass
class UIState:
    status_text: str = ""
    search_text: str = ""


class EditEngineApp(App[None]):
    """Minimal Textual UI embedding the edit engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#search-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}

	#search-input {
		display: none;
	}

	#search-input.-open {
		display: block;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
        ("ctrl+f", "open_search", "Find"),
    ]

    def __init__(
        self,
        *,
        path: Optional[Path] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        super().__init__()
        self.config = config or EngineConfig.from_env()
        self.path = path
        self._state = UIState()
        self.controller: KeyboardController | None = None
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._search_widget: Static | None = None
        self._search_input: Input | None = None
        self._logger = telemetry.get_logger("edit_engine.app")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._search_input = Input(placeholder="find", id="search-input")
        self._status_widget = Static("", id="status-line")
        self._search_widget = Static("", id="search-line")
        yield self._search_input
        yield self._status_widget
        yield self._search_widget
        yield Footer()

    def on_mount(self) -> None:
        text, status = self._read_initial_text()
        name = self.path.name if self.path else None
        self.controller = create_default_controller(text, name=name, config=self.config)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_search=self._show_search,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(self.controller, hooks)
        self._update_status(f"{status}  {self._key_hints()}")
        self.set_interval(self.config.clock_poll_ms / 1000, self._process_timeouts)

    def _key_hints(self) -> str:
        if self.controller is None:
            return ""
        registry = self.controller.registry
        hints = []
        for action_id, label in (("history.undo", "undo"), ("history.redo", "redo")):
            strokes = registry.strokes_for(action_id)
            if strokes:
                hints.append(f"{'/'.join(strokes)} {label}")
        return "  ".join(hints)

    def _read_initial_text(self) -> Tuple[str, str]:
        if self.path is None:
            return "", "new document"
        try:
            return self.path.read_text(encoding="utf-8"), f"opened {self.path}"
        except FileNotFoundError:
            return "", f"new file {self.path}"
        except OSError as exc:
            return "", f"open failed: {exc}"

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        if self._search_input is not None and self._search_input.has_focus:
            if event.key == "escape":
                self._close_search_input()
                event.stop()
            return
        normalized = normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.adapter:
            self.adapter.find(event.value)
        self._close_search_input()

    def action_open_search(self) -> None:
        if self._search_input is None:
            return
        self._search_input.add_class("-open")
        self._search_input.value = ""
        self._search_input.focus()

    def _close_search_input(self) -> None:
        if self._search_input is None:
            return
        self._search_input.remove_class("-open")
        self.set_focus(None)

    def action_save(self) -> None:
        if self.controller is None:
            return
        editor = self.controller.editor
        target = self.path or Path(editor.name)
        try:
            target.write_text(editor.get_text(), encoding="utf-8")
        except OSError as exc:
            telemetry.record_event(
                "document.save_failed",
                level="error",
                data={"path": str(target), "error": str(exc)},
                logger_name="edit_engine.app",
            )
            self._update_status(f"save failed: {exc}")
            return
        self.path = target
        editor.mark_saved(target.name)
        info = editor.file_info()
        self._update_status(f"saved {target} ({info.lines} lines, {info.size} chars)")

    def _update_buffer(self, snapshot: DocumentSnapshot) -> None:
        if not self._buffer_widget or self.controller is None:
            return
        matches = self.controller.editor.search.matches
        self._buffer_widget.update(render_snapshot(snapshot, matches))
        self._refresh_title()

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_search(self, summary: str) -> None:
        self._state.search_text = summary
        if self._search_widget:
            self._search_widget.update(summary)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        del payload
        if name == "search.changed" and self.controller is not None:
            self._update_buffer(self.controller.editor.snapshot())

    def _refresh_title(self) -> None:
        if self.controller is None:
            return
        editor = self.controller.editor
        marker = " *" if editor.has_unsaved_changes() else ""
        self.title = f"{editor.name}{marker}"

    def _log_line(self, line: str) -> None:
        self._logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the edit engine Textual demo.")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="File to open (created on first save if missing)",
    )
    parser.add_argument(
        "--idle-batch-ms",
        type=int,
        default=None,
        help="Idle time that closes a typing batch (default: EDIT_ENGINE_IDLE_BATCH_MS or 500)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # Console output would draw over the TUI.
    overrides: dict[str, Any] = {"console": False}
    if args.idle_batch_ms is not None:
        overrides["idle_batch_ms"] = args.idle_batch_ms
    config = replace(EngineConfig.from_env(), **overrides)
    telemetry.configure(settings=config)
    app = EditEngineApp(path=args.path, config=config)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
