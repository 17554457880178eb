"""Application bootstrap helpers."""

from pathlib import Path
from typing import List, Optional

from ..config.logging import get_logger, setup_logging
from ..config.settings import Settings, get_required_env_vars, get_settings
from ..ormdb.database import create_tables


def ensure_data_directory(settings: Optional[Settings] = None) -> Path:
    """Create the data directory and the alert database schema."""
    settings = settings or get_settings()
    data_path = Path(settings.data_directory)
    data_path.mkdir(parents=True, exist_ok=True)

    create_tables()
    get_logger(__name__).info("Data directory ready", path=str(data_path))
    return data_path


def initialize_application(settings: Optional[Settings] = None) -> Settings:
    """Configure logging from settings and prepare storage."""
    settings = settings or get_settings()

    setup_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        file_enabled=settings.log_file_enabled,
        file_path=settings.log_file_path,
        max_file_size=settings.log_max_file_size,
        backup_count=settings.log_backup_count,
    )
    ensure_data_directory(settings)

    get_logger(__name__).info(
        "Application initialized",
        environment=settings.environment,
        debug=settings.debug,
        cancel_window_minutes=settings.alert_cancel_window_minutes,
    )
    return settings


def missing_environment() -> List[str]:
    """Names of required variables that are not set."""
    settings = get_settings()
    return [name for name in get_required_env_vars() if not getattr(settings, name.lower(), None)]