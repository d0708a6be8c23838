"""Tray icon controller that displays the change-count indicator."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

try:  # pragma: no cover - optional dependency shim for type checking
    import pystray  # type: ignore
except ImportError as exc:  # pragma: no cover - pystray is required at runtime
    raise RuntimeError("pystray must be installed to use the indicator") from exc

from .icons import IndicatorIconFactory, IndicatorTheme
from .presentation import IndicatorView

_LOGGER = logging.getLogger(__name__)

IconBuilder = Callable[..., Any]


@dataclass
class IndicatorMenuActions:
    """Callbacks invoked by indicator menu selections."""

    refresh: Callable[[], None]
    quit_app: Callable[[], None]


class IndicatorController:
    """Manage the tray icon lifecycle, menu, and displayed counts.

    The icon starts hidden; ``show`` makes it visible with a rendered view
    and ``hide`` removes it from the tray without tearing it down. Clicking
    the icon activates the default menu entry, which requests a refresh.
    """

    def __init__(
        self,
        app_name: str,
        menu_actions: IndicatorMenuActions,
        *,
        icon_factory: Optional[IndicatorIconFactory] = None,
        theme: Optional[IndicatorTheme] = None,
        icon_builder: Optional[IconBuilder] = None,
    ) -> None:
        self._app_name = app_name
        self._menu_actions = menu_actions
        self._icon_factory = icon_factory or IndicatorIconFactory()
        self._theme = theme or detect_indicator_theme()
        self._icon_builder = icon_builder or pystray.Icon
        sizes = self._icon_factory.sizes
        self._display_size = 32 if 32 in sizes else sizes[-1]
        self._lock = threading.Lock()
        self._icon: Optional["pystray.Icon"] = None
        self._view: Optional[IndicatorView] = None
        self._ready = False

    @property
    def icon(self) -> Optional["pystray.Icon"]:
        """Return the underlying pystray icon instance."""
        return self._icon

    @property
    def view(self) -> Optional[IndicatorView]:
        """Return the view currently shown, or ``None`` while hidden."""
        return self._view

    @property
    def theme(self) -> IndicatorTheme:
        return self._theme

    def start(self) -> None:
        """Create the tray icon and run its event loop in the background."""
        if self._icon is not None:
            return
        icon = self._icon_builder(
            self._app_name, title=self._app_name, menu=self._build_menu()
        )
        self._icon = icon
        # A custom setup keeps the icon hidden until the first show().
        threading.Thread(
            target=icon.run, kwargs={"setup": self._on_ready}, daemon=True
        ).start()

    def stop(self) -> None:
        """Remove the tray icon."""
        with self._lock:
            icon, self._icon = self._icon, None
            self._ready = False
            self._view = None
        if icon is None:
            return
        try:
            icon.stop()
        except RuntimeError:  # pragma: no cover - pystray quirks
            _LOGGER.debug("pystray stop called after icon closed", exc_info=True)

    def show(self, view: IndicatorView) -> None:
        """Display ``view`` in the tray."""
        with self._lock:
            self._view = view
            if self._icon is None:
                return
            self._render(self._icon, view)
            if self._ready:
                self._icon.visible = True

    def hide(self) -> None:
        """Remove the indicator from view without disposing of the icon."""
        with self._lock:
            self._view = None
            if self._icon is not None and self._ready:
                self._icon.visible = False

    def _on_ready(self, icon: "pystray.Icon") -> None:
        with self._lock:
            self._ready = True
            if self._view is not None:
                self._render(icon, self._view)
                icon.visible = True

    def _render(self, icon: "pystray.Icon", view: IndicatorView) -> None:
        icon.icon = self._icon_factory.image(view, self._theme, self._display_size)
        icon.title = view.tooltip
        if self._ready:
            icon.update_menu()

    def _status_text(self, item: "pystray.MenuItem") -> str:
        del item
        view = self._view
        return view.text if view is not None else ""

    def _build_menu(self) -> "pystray.Menu":
        return pystray.Menu(
            pystray.MenuItem(self._status_text, lambda: None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                "Refresh", self._wrap(self._menu_actions.refresh), default=True
            ),
            pystray.MenuItem("Quit", self._wrap(self._menu_actions.quit_app)),
        )

    def _wrap(
        self, func: Callable[[], None]
    ) -> Callable[["pystray.Icon", "pystray.MenuItem"], None]:
        def wrapper(icon: "pystray.Icon", item: "pystray.MenuItem") -> None:
            del icon, item
            try:
                func()
            except Exception:  # pragma: no cover - defensive logging
                _LOGGER.exception("Unhandled exception in indicator menu callback")

        return wrapper


def detect_indicator_theme(preference: str = "") -> IndicatorTheme:
    """Resolve the icon theme from ``preference`` or the Windows settings."""
    if preference:
        try:
            return IndicatorTheme(preference.lower())
        except ValueError:
            _LOGGER.warning("Unknown theme %r, detecting instead", preference)
    try:
        import winreg
    except ModuleNotFoundError:  # pragma: no cover - not running on Windows
        return IndicatorTheme.LIGHT

    try:
        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER,
            r"Control Panel\Accessibility\HighContrast",
        ) as key:  # type: ignore[attr-defined]
            flags, _ = winreg.QueryValueEx(key, "Flags")
            # HCF_HIGHCONTRASTON = 0x01
            if int(flags) & 0x01:
                return IndicatorTheme.HIGH_CONTRAST
    except OSError:
        pass

    # Taskbar icons follow the system theme, not the app theme.
    key_path = r"Software\Microsoft\Windows\CurrentVersion\Themes\Personalize"
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path) as key:  # type: ignore[attr-defined]
            value, _ = winreg.QueryValueEx(key, "SystemUsesLightTheme")
    except OSError:
        _LOGGER.debug("Failed to query Windows theme preference", exc_info=True)
        return IndicatorTheme.LIGHT
    return IndicatorTheme.LIGHT if int(value) else IndicatorTheme.DARK
