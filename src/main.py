import logging
import signal
import sys
from typing import Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    default_app_config,
    load_app_config,
    resolve_config_path,
)
from audio import AudioCueError
from planner import HistoryRepository
from runtime import PlannerRuntime, RuntimeBootstrap
from runtime.contracts import AudioCueSinkLike
from server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_planner")


def setup_signal_handlers(runtime: PlannerRuntime) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logging.getLogger("pomodoro_planner").info(
            "%s received, stopping...", signal.Signals(signum).name
        )
        runtime.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def load_config(logger: logging.Logger) -> AppConfig:
    config_path = resolve_config_path()
    if not config_path.exists():
        logger.info("No config file at %s, using defaults", config_path)
        return default_app_config()
    app_config = load_app_config(str(config_path))
    logger.info("Loaded runtime config: %s", config_path)
    return app_config


def build_audio_sink(
    app_config: AppConfig,
    logger: logging.Logger,
) -> Optional[AudioCueSinkLike]:
    if not app_config.audio.enabled:
        return None
    try:
        # sounddevice raises OSError at import when PortAudio is missing.
        from audio.output import SoundDeviceCuePlayer

        return SoundDeviceCuePlayer.from_settings(
            app_config.audio,
            logger=logging.getLogger("audio"),
        )
    except (AudioCueError, ImportError, OSError) as error:
        logger.warning("Audio cues disabled: %s", error)
        return None


def build_ui_server(app_config: AppConfig, logger: logging.Logger) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        return None

    try:
        ui_server = UIServer(
            config=ui_server_config,
            logger=logging.getLogger("ui_server"),
        )
        logger.info("Starting UI server...")
        ui_server.start()
        logger.info("UI server ready at http://%s:%d", ui_server.host, ui_server.port)
    except Exception as error:
        logger.error("UI server startup failed: %s", error)
        logger.warning("Continuing without UI server.")
        return None
    return ui_server


def main() -> int:
    """Run the schedule planner until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_config(logger)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    history_repository = None
    if app_config.history.enabled:
        history_repository = HistoryRepository(
            app_config.history.file,
            logger=logging.getLogger("planner.history"),
        )

    ui_server = build_ui_server(app_config, logger)
    runtime = PlannerRuntime(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            app_config=app_config,
            history_repository=history_repository,
            audio_sink=build_audio_sink(app_config, logger),
            ui_server=ui_server,
        )
    )
    if ui_server is not None:
        ui_server.set_command_handler(runtime.submit)

    setup_signal_handlers(runtime)
    try:
        return runtime.run()
    finally:
        if ui_server is not None:
            logger.info("Stopping UI server...")
            try:
                ui_server.stop()
            except Exception as error:
                logger.error("Error stopping UI server: %s", error, exc_info=True)


if __name__ == "__main__":
    sys.exit(main())
