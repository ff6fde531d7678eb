from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, QSettings, QThreadPool, Signal, Slot
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QLineEdit, QMainWindow, QMessageBox, QPlainTextEdit,
    QStackedWidget, QToolBar, QVBoxLayout, QWidget,
)

from kvwiki.config import SettingsKeys, get_str, safe_set_setting
from kvwiki.core.keys import parse_shorthand
from kvwiki.errors import InvalidKeyError
from kvwiki.logging_setup import log
from kvwiki.navigation import NavigationHistory, Step
from kvwiki.services.autosave import AutosaveTimer
from kvwiki.services.session import EditorSession, Notice, OperationResult
from kvwiki.settings import APP_NAME
from kvwiki.ui.qt_utils import blocked_signals
from kvwiki.ui.webview import LinkableWebView
from kvwiki.workers.page_io import PageIOWorker


class _FocusOutSave(QObject):
    """Flushes a pending autosave when an edit field loses focus."""

    def __init__(self, autosave: AutosaveTimer, parent: QObject):
        super().__init__(parent)
        self._autosave = autosave

    def eventFilter(self, obj, event):  # type: ignore[override]
        if event.type() == QEvent.Type.FocusOut and self._autosave.pending:
            self._autosave.flush()
        return False


class WikiWindow(QMainWindow):
    noticeRequested = Signal(object)

    def __init__(self, session: EditorSession, *, settings: QSettings | None = None):
        super().__init__()
        self.session = session
        self.settings = settings
        # notices may come from the I/O thread; the signal queues them onto the GUI thread
        self.noticeRequested.connect(self._show_notice)
        self.session.on_notice = self.noticeRequested.emit
        self.setWindowTitle(APP_NAME)

        # one thread: storage operations run strictly in request order
        self._pool = QThreadPool(self)
        self._pool.setMaxThreadCount(1)
        self._req_id = 0  # monotonically increasing; used to drop stale results
        self._load_req_id = 0  # last load issued; results of anything before it are stale

        self.history = NavigationHistory()
        self._nav_step: Step = "open"  # how the pending load moves through history

        # UI
        self.address = QLineEdit()
        self.address.setPlaceholderText("page, notebook/page or address…")
        self.address.returnPressed.connect(self._on_address_entered)

        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("Title")
        self.content_edit = QPlainTextEdit()
        self.content_edit.setPlaceholderText("Markdown… [link](?) makes a new page on save")
        self.preview = LinkableWebView()
        self.preview.linkClicked.connect(self._on_link_clicked)

        edit = QWidget()
        edit_layout = QVBoxLayout(edit)
        edit_layout.setContentsMargins(0, 0, 0, 0)
        edit_layout.addWidget(self.title_edit)
        edit_layout.addWidget(self.content_edit)

        self.stack = QStackedWidget()
        self.stack.addWidget(self.preview)
        self.stack.addWidget(edit)

        root = QWidget()
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.addWidget(self.address)
        root_layout.addWidget(self.stack)
        self.setCentralWidget(root)

        # Autosave debounce; explicit saves go through flush()
        self.autosave = AutosaveTimer(self._save_now, delay_ms=session.config.autosave_delay_ms, parent=self)
        self.title_edit.textChanged.connect(self.autosave.poke)
        self.content_edit.textChanged.connect(self.autosave.poke)
        self.title_edit.returnPressed.connect(self.content_edit.setFocus)
        focus_save = _FocusOutSave(self.autosave, self)
        self.title_edit.installEventFilter(focus_save)
        self.content_edit.installEventFilter(focus_save)

        self._build_toolbar()

    def _build_toolbar(self):
        bar = QToolBar("Page")
        self.addToolBar(bar)

        act_back = QAction("Back", self)
        act_back.setShortcut(QKeySequence.StandardKey.Back)
        act_back.triggered.connect(self._go_back)

        act_forward = QAction("Forward", self)
        act_forward.setShortcut(QKeySequence.StandardKey.Forward)
        act_forward.triggered.connect(self._go_forward)

        act_edit = QAction("Edit", self)
        act_edit.setShortcut("Ctrl+E")
        act_edit.triggered.connect(lambda: self._set_edit_mode(None))

        act_save = QAction("Save", self)
        act_save.setShortcut("Ctrl+S")
        act_save.triggered.connect(self._on_save_clicked)

        act_delete = QAction("Delete", self)
        act_delete.triggered.connect(self._on_delete_clicked)

        act_undo = QAction("Undo delete", self)
        act_undo.triggered.connect(self._on_restore_clicked)

        act_help = QAction("Help", self)
        act_help.setShortcut(QKeySequence.StandardKey.HelpContents)
        act_help.triggered.connect(self._show_help)

        for act in (act_back, act_forward, act_edit, act_save, act_delete, act_undo, act_help):
            bar.addAction(act)

    # ───────────────────────── startup / shutdown ─────────────────────────

    def start(self, address: str | None = None) -> None:
        if self.settings is not None:
            geometry = self.settings.value(SettingsKeys().UI_GEOMETRY)
            if geometry:
                self.restoreGeometry(geometry)
        if not address and self.settings is not None:
            address = get_str(self.settings, SettingsKeys().LAST_ADDRESS, "")
        self._open_address(address or self.session.codec.page_url(""))

    def closeEvent(self, event):  # type: ignore[override]
        """Persist last edits even if the autosave timer has not fired yet."""
        try:
            self._pool.waitForDone()
            if self.autosave.pending:
                self.autosave.cancel()
                if self.session.page is not None:
                    self.session.save(self.title_edit.text(), self.content_edit.toPlainText())
            if self.settings is not None:
                safe_set_setting(self.settings, SettingsKeys().UI_GEOMETRY, self.saveGeometry())
                if self.history.current is not None:
                    safe_set_setting(self.settings, SettingsKeys().LAST_ADDRESS, self.session.address())
        except Exception:
            log.exception("Failed to flush page on close")
        super().closeEvent(event)

    # ───────────────────────── navigation ─────────────────────────

    def _open_address(self, address: str) -> None:
        log.info("Opening page: address=%s", address)
        self._load(lambda: self.session.load(address), "open")

    def _go_back(self) -> bool:
        target = self.history.back_target()
        if target is None:
            return False
        self._load(lambda: self.session.load_keys(target), "back")
        return True

    def _go_forward(self) -> bool:
        target = self.history.forward_target()
        if target is None:
            return False
        self._load(lambda: self.session.load_keys(target), "forward")
        return True

    def _load(self, op, step: Step) -> None:
        # history is committed in _on_io_finished, once the load succeeded
        if self.autosave.pending:
            self.autosave.flush()
        self._nav_step = step
        self._load_req_id = self._run(op)

    def _open_keys(self, keys) -> None:
        try:
            address = self.session.open_keys(keys)
        except InvalidKeyError as exc:
            self._show_notice(Notice("error", str(exc), self.session.config.notice_timeout_ms))
            return
        self._open_address(address)

    @Slot(str)
    def _on_link_clicked(self, url: str) -> None:
        self._open_keys(self.session.codec.decode(url))

    def _on_address_entered(self) -> None:
        text = self.address.text().strip()
        if "?" in text:
            self._open_keys(self.session.codec.decode(text))
        else:
            self._open_keys(parse_shorthand(text))

    # ───────────────────────── page actions ─────────────────────────

    def _save_now(self) -> None:
        if self.session.page is None:
            return
        title = self.title_edit.text()
        content = self.content_edit.toPlainText()
        self._run(lambda: self.session.save(title, content))

    def _on_save_clicked(self) -> None:
        self.autosave.flush()
        self._set_edit_mode(False)

    def _on_delete_clicked(self) -> None:
        if self.session.page is None:
            return
        answer = QMessageBox.question(
            self,
            "Delete page",
            "Delete this page? You can undo it until you open another page.",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self.autosave.cancel()
        self._set_edit_mode(False)
        self._run(self.session.delete)

    def _on_restore_clicked(self) -> None:
        if self.session.backup is None:
            return
        self._run(self.session.restore_backup)

    def _set_edit_mode(self, state: bool | None) -> None:
        if self.session.page is None:
            return
        editing = self.session.set_edit_mode(state)
        self.stack.setCurrentIndex(1 if editing else 0)
        if editing:
            self.content_edit.setFocus()

    def _show_help(self) -> None:
        self.stack.setCurrentIndex(0)
        self.preview.show_html(self.session.render_help())

    # ───────────────────────── storage I/O (background) ─────────────────────────

    def _run(self, op) -> int:
        self._req_id += 1
        worker = PageIOWorker(req_id=self._req_id, op=op)
        worker.signals.finished.connect(self._on_io_finished)
        worker.signals.failed.connect(self._on_io_failed)
        self._pool.start(worker)
        return self._req_id

    @Slot(int, object)
    def _on_io_finished(self, req_id: int, result: OperationResult) -> None:
        if req_id < self._load_req_id:
            log.debug("Stale page result dropped: req_id=%d op=%s", req_id, result.op)
            return
        if result.ok:
            if result.op == "load":
                self.history.visit(result.keys, self._nav_step)
                self._show_page()
            elif result.op == "restore":
                self.history.visit(result.keys)
                self._show_page()
            elif result.op == "save":
                self._sync_editor_after_save()
            elif result.op == "delete":
                if not self._go_back():
                    self._open_address(self.session.codec.page_url(""))

    @Slot(int, str)
    def _on_io_failed(self, req_id: int, err: str) -> None:
        log.warning("Page operation failed (bg): %s", err)
        self._show_notice(Notice("error", err, self.session.config.notice_timeout_ms))

    # ───────────────────────── rendering ─────────────────────────

    def _show_page(self) -> None:
        page = self.session.page
        if page is None:
            return
        with blocked_signals(self.title_edit):
            self.title_edit.setText(page.title)
        with blocked_signals(self.content_edit):
            self.content_edit.setPlainText(page.content)
        self.address.setText(self.session.address())
        self.setWindowTitle(page.title or APP_NAME)
        self._render_preview()
        self._set_edit_mode(self.session.edit_mode)

    def _sync_editor_after_save(self) -> None:
        """Put expanded placeholders back into the editor, keeping the cursor."""
        page = self.session.page
        if page is None:
            return
        if self.content_edit.toPlainText() != page.content:
            cursor = self.content_edit.textCursor()
            pos = cursor.position()
            with blocked_signals(self.content_edit):
                self.content_edit.setPlainText(page.content)
            cursor = self.content_edit.textCursor()
            cursor.setPosition(min(pos, len(page.content)))
            self.content_edit.setTextCursor(cursor)
        self.setWindowTitle(page.title or APP_NAME)
        self._render_preview()

    def _render_preview(self) -> None:
        html = self.session.render()
        if html is not None:
            self.preview.show_html(html)

    def _show_notice(self, notice: Notice) -> None:
        self.statusBar().showMessage(notice.message, notice.timeout_ms)
