import datetime
import inspect
import logging.config
from pathlib import Path
from typing import Optional

import yaml

from settings import settings

BASE_DIR = Path(__file__).parent.resolve()
LOGS_DIR = BASE_DIR / "logs"


def _resolve_config_path(config_path: Optional[str]) -> Path:
    path = Path(config_path or settings.LOG_CONFIG_PATH)
    return path if path.is_absolute() else BASE_DIR / path


def setup_logging(
    config_path: Optional[str] = None,
    process_name: Optional[str] = None,
    mode_append: bool = False,
    level: Optional[str] = None,
) -> None:
    """Configure logging from the YAML dictConfig file.

    File handlers are redirected to `logs/<process_name>[_<timestamp>].log`. `level`
    overrides the level of every configured logger, e.g. "DEBUG" while investigating
    suggestion ranking.
    """
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"File {config_file} does not exist.")
    LOGS_DIR.mkdir(exist_ok=True)

    if not process_name:
        process_name = Path(inspect.stack()[1].filename).name.split(".")[0]

    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    with open(config_file, "r") as file:
        config = yaml.safe_load(file)

    for handler in config.get("handlers", {}).values():
        if "filename" not in handler:
            continue
        suffix = "" if mode_append else f"_{timestamp}"
        handler["filename"] = str(LOGS_DIR / f"{process_name}{suffix}.log")

    if level:
        for logger_config in config.get("loggers", {}).values():
            logger_config["level"] = level
        config.setdefault("root", {})["level"] = level

    logging.config.dictConfig(config)
