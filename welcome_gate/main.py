import argparse
import sys
from typing import List, Optional

from loguru import logger

from welcome_gate.core.errors import StorageFailure
from welcome_gate.core.logging import setup_logging
from welcome_gate.core.locator import ServiceLocator
from welcome_gate.core.protocol import SessionResult


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="welcome_gate",
        description="First-run mode selection for the digital-human host",
    )
    parser.add_argument("--config", default="welcome_gate.json", help="Config file (JSON or TOML)")
    parser.add_argument("--reset", action="store_true", help="Clear the stored onboarding choice and exit")
    parser.add_argument("--summary", action="store_true", help="Print the stored onboarding state and exit")
    parser.add_argument("--simulate", action="store_true", help="Run the welcome page simulation instead of QtWebEngine")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    services = ServiceLocator(args.config)
    settings = services.config.data
    setup_logging(settings.general.debug_mode, settings.general.log_dir)

    if args.reset:
        services.onboarding.reset()
        print("Onboarding state cleared.")
        return 0
    if args.summary:
        try:
            print(services.onboarding.summary(services.schema_version))
        except StorageFailure as e:
            logger.error(f"Cannot read onboarding state: {e}")
            return 1
        return 0

    simulate = args.simulate or settings.welcome.simulate_surface
    if simulate:
        from welcome_gate.ui.surface import SimulatedSurface as surface_cls
    else:
        # QtWebEngine must be loaded before the QApplication exists.
        from welcome_gate.ui.web_surface import WebEngineSurface as surface_cls

    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QApplication
    from welcome_gate.ui.controller import HostController
    from welcome_gate.ui.locale_context import system_locale_name
    from welcome_gate.ui.mode_window import ModeWindow
    from welcome_gate.ui.router import ChoiceRouter
    from welcome_gate.ui.welcome_screen import WelcomeScreen, default_page_url

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("welcome_gate")
    # Screens are torn down and rebuilt on language changes; quitting is explicit.
    app.setQuitOnLastWindowClosed(False)
    services.languages.set_system_locale_provider(system_locale_name)

    windows = []

    def open_mode(result: SessionResult):
        window = ModeWindow(result.choice, services.languages)
        window.setAttribute(Qt.WA_DeleteOnClose)
        window.destroyed.connect(app.quit)
        windows.append(window)
        window.show()

    router = ChoiceRouter()
    router.register_handler(SessionResult.LOCAL_CHOICE, open_mode)
    router.register_handler(SessionResult.CLOUD_CHOICE, open_mode)
    router.register_handler(SessionResult.CANCELLED, lambda _result: app.quit())

    def screen_factory(language, bridge, state):
        return WelcomeScreen(language, bridge, surface_cls, state)

    controller = HostController(
        services.onboarding,
        services.languages,
        router,
        screen_factory,
        page_url=settings.welcome.page_url or default_page_url(settings.welcome.debug_page),
        schema_version=services.schema_version,
        show_animation=settings.welcome.show_animation,
    )
    app.aboutToQuit.connect(controller.shutdown)

    phase = controller.start()
    logger.info(f"Host session started in phase {phase.value}")
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
