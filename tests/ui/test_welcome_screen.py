"""
WelcomeScreen with the simulated surface.
"""
from functools import partial

from PySide6.QtCore import QCoreApplication
from welcome_gate.core.language import Language
from welcome_gate.core.protocol import push_language_script
from welcome_gate.ui.bridge import WelcomeBridge
from welcome_gate.ui.surface import SimulatedSurface
from welcome_gate.ui.welcome_screen import ASSETS_DIR, ScreenState, WelcomeScreen, default_page_url


def make_screen(language=Language.ENGLISH, surface_factory=SimulatedSurface, animate=False):
    bridge = WelcomeBridge(language.code, session_id=1)
    screen = WelcomeScreen(language, bridge, surface_factory, ScreenState(show_animation=animate))
    return screen, bridge


def test_default_page_url():
    assert (ASSETS_DIR / "welcome.html").is_file()
    assert default_page_url().startswith("file://")
    assert default_page_url().endswith("welcome.html")
    assert "debug=true" in default_page_url(debug=True)


def test_load_reports_page_loaded(qapp):
    screen, bridge = make_screen()
    loads, failures = [], []
    bridge.pageLoadReported.connect(loads.append)
    screen.loadFailed.connect(failures.append)

    screen.load("about:blank")
    assert loads == []
    QCoreApplication.processEvents()

    assert loads == [1]
    assert failures == []
    assert screen.bridge_available is False
    assert screen.surface.url == "about:blank"
    screen.teardown()


def test_load_failure_is_reported(qapp):
    screen, bridge = make_screen(surface_factory=partial(SimulatedSurface, fail_with="net::ERR_ABORTED"))
    loads, failures = [], []
    bridge.pageLoadReported.connect(loads.append)
    screen.loadFailed.connect(failures.append)

    screen.load("about:blank")
    QCoreApplication.processEvents()

    assert failures == ["net::ERR_ABORTED"]
    assert loads == []
    screen.teardown()


def test_entry_animation_runs_once_per_session(qapp):
    screen, _bridge = make_screen(animate=True)
    screen.load("about:blank")
    QCoreApplication.processEvents()

    assert screen._animation is not None
    assert screen.save_state().show_animation is False
    screen.teardown()


def test_buttons_drive_the_bridge(qapp):
    screen, bridge = make_screen()
    choices, changes = [], []
    bridge.userChoiceReported.connect(lambda sid, value: choices.append(value))
    bridge.languageChangeRequested.connect(lambda sid, code: changes.append(code))

    screen.surface.local_btn.click()
    screen.surface.cloud_btn.click()
    screen.surface.language_btn.click()

    assert choices == ["local", "cloud"]
    assert changes == ["zh"]
    screen.teardown()


def test_push_language_reaches_surface(qapp):
    screen, _bridge = make_screen(Language.CHINESE)
    assert screen.windowTitle() == "索灵数字人"

    screen.push_language(push_language_script("zh"))

    assert screen.surface.scripts == [push_language_script("zh")]
    screen.teardown()


def test_pause_resume(qapp):
    screen, _bridge = make_screen()
    screen.pause()
    assert screen.surface.paused
    screen.resume()
    assert not screen.surface.paused
    screen.teardown()


def test_teardown_is_silent_and_idempotent(qapp):
    screen, bridge = make_screen()
    closed, choices = [], []
    screen.closed.connect(lambda: closed.append(True))
    bridge.userChoiceReported.connect(lambda sid, value: choices.append(value))
    surface = screen.surface
    screen.show()

    assert screen.teardown() is True
    assert screen.teardown() is False
    assert closed == []
    assert surface.torn_down

    surface.simulate_choice("local")
    assert choices == []


def test_user_close_emits_closed(qapp):
    screen, _bridge = make_screen()
    closed = []
    screen.closed.connect(lambda: closed.append(True))
    screen.show()

    screen.close()

    assert closed == [True]
    screen.teardown()
