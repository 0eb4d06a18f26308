"""
Observer hooks for following conversion sessions without touching their state.
"""

from convertio_cli.models.session import ConversionSession


class SessionObserver:
    """
    Receives session state changes from the ConversionManager.

    The default implementation ignores every event, which is what headless
    runs and tests use. Observers must only read the sessions they are given.
    """

    def on_session_created(self, session: ConversionSession) -> None:
        pass

    def on_session_updated(self, session: ConversionSession) -> None:
        pass

    def on_session_finished(self, session: ConversionSession) -> None:
        pass
