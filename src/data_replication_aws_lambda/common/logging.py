"""Structured logging for the replication handlers.

Handlers log through an AWS Lambda Powertools ``Logger``. Its handler is also
attached to the root logger so that helper modules (and boto3/psycopg2) emit
records in the same JSON format.
"""

import logging
from typing import Optional, Union

from aibs_informatics_core.utils.logging import get_all_handlers
from aws_lambda_powertools.logging import Logger

from data_replication_aws_lambda.common.base import HandlerMixins


class LoggingMixins(HandlerMixins):
    """Gives a handler a lazily created powertools ``Logger``.

    ``log`` and ``logger`` are aliases for the same instance.
    """

    @property
    def log(self) -> Logger:
        """Alias for the logger property.

        Returns:
            The handler's Logger.
        """
        return self.logger

    @log.setter
    def log(self, value: Logger):
        """Replace the handler's Logger.

        Args:
            value (Logger): The Logger instance to use.
        """
        self.logger = value

    @property
    def logger(self) -> Logger:
        """Get the Logger, creating a service logger on first access.

        Returns:
            The Logger named after this handler's service.
        """
        try:
            return self._logger
        except AttributeError:
            self.logger = self.get_logger(self.service_name())
        return self.logger

    @logger.setter
    def logger(self, value: Logger):
        """Set the Logger instance.

        Args:
            value (Logger): The Logger instance to set.
        """
        self._logger = value

    @classmethod
    def get_logger(cls, service: Optional[str] = None, add_to_root: bool = False) -> Logger:
        """Create a new Logger for this handler class.

        Args:
            service (Optional[str]): Service name stamped on every record.
            add_to_root (bool): Also register the logger's handler on the root logger.

        Returns:
            A configured Logger instance.
        """
        return get_service_logger(service=service, add_to_root=add_to_root)

    def add_logger_to_root(self):
        """Share this handler's log handler with the root logger.

        Records from the database and S3 helper modules then come out in the
        same structured format.
        """
        add_handler_to_logger(self.logger, None)


def get_service_logger(
    service: Optional[str] = None, child: bool = False, add_to_root: bool = False
) -> Logger:
    """Create a powertools Logger for a service.

    Args:
        service (Optional[str]): Service name stamped on every record.
        child (bool): Create a child logger that reuses its parent's handler.
        add_to_root (bool): Also register the logger's handler on the root logger.

    Returns:
        The configured Logger.
    """
    service_logger = Logger(service=service, child=child)
    if add_to_root:
        add_handler_to_logger(service_logger)
    return service_logger


def add_handler_to_logger(
    source_logger: Logger, target_logger: Union[str, logging.Logger, None] = None
):
    """Register the handler of ``source_logger`` on ``target_logger``.

    Args:
        source_logger (Logger): Logger whose registered handler is shared.
        target_logger (Union[str, logging.Logger, None]): Logger (or logger name) to
            receive the handler. None targets the root logger.
    """
    handler = source_logger.registered_handler

    if target_logger is None or isinstance(target_logger, str):
        target_logger = logging.getLogger(target_logger)
        target_logger.setLevel(min(source_logger.log_level, target_logger.getEffectiveLevel()))

    if handler not in get_all_handlers(target_logger):
        target_logger.addHandler(handler)
