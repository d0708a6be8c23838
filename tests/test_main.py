from __future__ import annotations

from pathlib import Path

import pytest

from git_stages.__main__ import build_change_sources, resolve_workspace_root
from git_stages.runtime import IndicatorRuntime
from git_stages.settings import IndicatorSettings
from git_stages.signals import WatchdogChangeSource
from git_stages.status import ChangeCounts


class NullIndicator:
    def show(self, view) -> None:
        pass

    def hide(self) -> None:
        pass


def test_workspace_from_argument_wins(tmp_path: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    settings = IndicatorSettings(repository_path=str(other))
    assert resolve_workspace_root([str(tmp_path)], settings) == tmp_path.resolve()


def test_workspace_from_settings_then_cwd(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    configured = tmp_path / "configured"
    configured.mkdir()
    settings = IndicatorSettings(repository_path=str(configured))
    assert resolve_workspace_root([], settings) == configured.resolve()

    monkeypatch.chdir(tmp_path)
    assert resolve_workspace_root([], IndicatorSettings()) == tmp_path.resolve()


def test_missing_workspace_resolves_to_none(tmp_path: Path) -> None:
    assert resolve_workspace_root([str(tmp_path / "nope")], IndicatorSettings()) is None


def _runtime(root, settings: IndicatorSettings) -> IndicatorRuntime:
    return IndicatorRuntime(
        settings,
        root,
        NullIndicator(),
        query=lambda *args, **kwargs: ChangeCounts(0, 0),
    )


def test_change_sources_watch_workspace(tmp_path: Path) -> None:
    settings = IndicatorSettings()
    sources = build_change_sources(_runtime(tmp_path, settings), settings)
    assert len(sources) == 1
    assert isinstance(sources[0], WatchdogChangeSource)
    assert sources[0].root == tmp_path


def test_change_sources_disabled_or_without_workspace(tmp_path: Path) -> None:
    disabled = IndicatorSettings(watch_files=False)
    assert build_change_sources(_runtime(tmp_path, disabled), disabled) == []
    settings = IndicatorSettings()
    assert build_change_sources(_runtime(None, settings), settings) == []
