import logging
import logging.config


def setup_logging(app_config) -> logging.Logger:
    """Применить конфигурацию логирования из AppConfig.

    Каталог логов создаётся только при LOG_TO_FILE=true, иначе пишем
    в консоль.
    """
    if app_config.log_to_file:
        app_config.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(app_config.get_logging_config())

    logger = logging.getLogger("dopamind")
    logger.debug(f"📝 Логирование настроено: {app_config.log_level.value}")
    return logger
