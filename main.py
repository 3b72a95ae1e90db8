"""Entry point wiring the Tkinter application."""
from config import load_config
from errors import ConfigurationError
from logging_bus import emit, set_file_logger, set_verbose, start_dispatcher
from logic.transcript_engine import TranscriptEngine
from persistence import JsonFileStore, SessionStore
from state import AppState
from ui.layout import launch_ui


def main() -> None:
    try:
        config = load_config()
    except ConfigurationError as e:
        raise SystemExit(f"[ERROR] {e.message}")
    set_verbose(config.settings.get('verbose', True))
    set_file_logger(config.settings.get('activity_log_file'))
    start_dispatcher()
    emit('INFO', 'SYSTEM', 'Starting', model=config.model)

    store = SessionStore(JsonFileStore(config.session_file))
    state = AppState.restore(store)
    engine = TranscriptEngine(config, store=store)
    launch_ui(config, engine, state)


if __name__ == '__main__':
    main()
