"""Menu-bar (system tray) shell for Pomodori."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QRectF, Qt
from PyQt6.QtGui import QColor, QIcon, QImage, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from .audio.sounds import SoundManager
from .notifications import TrayNotifier, completion_message
from .settings import Settings
from .timer.engine import Session, TimerEngine, TimerState

log = logging.getLogger(__name__)


# ── tray-icon image generation ────────────────────────────────────────────


def _make_tray_icon(state: TimerState, session: Session, progress: float = 0.0) -> QIcon:
    """Generate a monochrome template icon for the macOS menu bar.

    - IDLE:              thin circle outline
    - RUNNING, work:     filled circle
    - RUNNING, break:    outline with a centre dot
    - PAUSED:            two vertical pause bars
    Running icons also get an outer arc proportional to *progress*.
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)  # template image: macOS tints automatically

    cx, cy, r = size // 2, size // 2, size // 2 - 10

    if state == TimerState.PAUSED:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        bar_w, bar_h, gap = 8, 28, 6
        y = cy - bar_h // 2
        p.drawRoundedRect(cx - gap - bar_w, y, bar_w, bar_h, 3, 3)
        p.drawRoundedRect(cx + gap, y, bar_w, bar_h, 3, 3)
    elif state == TimerState.RUNNING and session == Session.WORK:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if state == TimerState.RUNNING:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            dot_r = 6
            p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)

    if state == TimerState.RUNNING and progress > 0:
        pen = QPen(colour, 4)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        p.setPen(pen)
        p.setBrush(Qt.BrushStyle.NoBrush)
        # Qt angles are 1/16 degree, counter-clockwise from 3 o'clock
        span = -round(360 * 16 * progress)
        p.drawArc(QRectF(3, 3, size - 6, size - 6), 90 * 16, span)

    p.end()

    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


def primary_action_label(state: TimerState) -> str:
    return {
        TimerState.IDLE: "Start",
        TimerState.RUNNING: "Pause",
        TimerState.PAUSED: "Resume",
    }[state]


class PomodoriApp(QObject):
    """Owns the tray icon, its menu and the timer engine.

    Menu commands go to the engine; the engine's signals come back here to
    refresh the tooltip, menu and icon, and to announce completions.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        parent: QObject | None = None,
        *,
        engine: TimerEngine | None = None,
        sound_manager: SoundManager | None = None,
        notifier: TrayNotifier | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or Settings()

        self._engine = engine or TimerEngine(parent=self)
        self._sounds = sound_manager or SoundManager(
            self,
            volume=self._settings.sound_volume,
            enabled=self._settings.sound_enabled,
        )

        # ── system tray icon ──────────────────────────────────────────
        self._tray_icon = QSystemTrayIcon(self)
        self._notifier = notifier or TrayNotifier(
            self._tray_icon, enabled=self._settings.notifications_enabled,
        )
        self._build_tray_menu()

        # ── wire engine signals ───────────────────────────────────────
        self._engine.ticked.connect(self.update_display)
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.completed.connect(self._on_completed)

        self.update_display()

    # ── accessors ─────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def tray_icon(self) -> QSystemTrayIcon:
        return self._tray_icon

    @property
    def menu(self) -> QMenu:
        return self._menu

    def show(self) -> None:
        self._tray_icon.show()

    # ══════════════════════════════════════════════════════════════════
    #  TRAY MENU
    # ══════════════════════════════════════════════════════════════════

    def _build_tray_menu(self) -> None:
        menu = QMenu()

        self._session_action = menu.addAction("")
        self._session_action.setEnabled(False)
        self._clock_action = menu.addAction("")
        self._clock_action.setEnabled(False)

        menu.addSeparator()

        self._primary_action = menu.addAction("Start")
        self._primary_action.triggered.connect(self._on_primary)

        self._reset_action = menu.addAction("Reset")
        self._reset_action.triggered.connect(self._engine.reset)

        self._skip_action = menu.addAction("")
        self._skip_action.triggered.connect(self._engine.skip)

        menu.addSeparator()

        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self.quit)

        self._menu = menu
        self._tray_icon.setContextMenu(menu)

    def _on_primary(self) -> None:
        """Start, pause, or resume based on current state."""
        if self._engine.state == TimerState.RUNNING:
            self._engine.pause()
        else:
            self._engine.start()

    def update_display(self) -> None:
        """Re-render everything the user sees from the engine's state."""
        engine = self._engine
        text = engine.display_string
        self._tray_icon.setToolTip(text)
        self._clock_action.setText(text)
        self._session_action.setText(f"{engine.session.label} Session")
        self._primary_action.setText(primary_action_label(engine.state))
        self._skip_action.setText(f"Skip to {engine.session.next.label}")
        self._tray_icon.setIcon(
            _make_tray_icon(engine.state, engine.session, engine.percent_complete)
        )

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        log.debug("State now %s", state.name)
        self.update_display()

    def _on_completed(self) -> None:
        # Still the session that just finished at this point.
        finished = self._engine.session
        title, body = completion_message(finished)
        self._notifier.notify(title, body)
        self._sounds.play_completion(finished)

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def quit(self) -> None:
        """Stop the timer, drop the tray icon and leave the event loop."""
        self._engine.reset()
        self._tray_icon.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()
