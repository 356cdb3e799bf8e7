"""Regex crossword solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class SolverConfig(BaseSettings):
    """Configuration settings for the regex crossword solver."""

    live_display: bool = False
    """Whether to draw the grid on the terminal and update it in place. Default: False."""

    write_log_file: bool = True
    """Whether to write a log file for each solved puzzle. Default: True."""

    log_dir: str = "logs"
    """Directory that per-puzzle log files are written to. Default: "logs"."""

    show_allowed_chars: bool = True
    """Whether to log the universe and the allowed characters of every line. Default: True."""

    log_events: bool = True
    """Whether to log every board event (tried, narrowed, decided cells). Default: True."""

    model_config = SettingsConfigDict(
        env_prefix="REGEXCROSS_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = SolverConfig()
