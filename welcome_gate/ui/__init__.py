"""
Welcome Gate UI - PySide6 host for the onboarding page.

Provides:
- HostController: decides, shows the welcome screen, routes the outcome
- WelcomeScreen: localized window around the embedded surface
- WelcomeBridge: QWebChannel object exposed to the page as `HostInterface`
- SimulatedSurface / WebEngineSurface: page hosts (preview and production)
- ChoiceRouter: result-code dispatch to the destination screens
- LanguageSelectorDialog: language picker for host screens

web_surface is not imported here: QtWebEngine has to be imported before the
QApplication exists, which is the entry point's decision.
"""
