from aws_lambda_powertools.utilities.typing import LambdaContext

from data_replication_aws_lambda.common.constants import SERVICE_NAME

CONTEXT_ATTR = "_context"


class HandlerMixins:
    """Invocation-scoped attributes shared by every replication handler.

    Attributes:
        context: The AWS Lambda context object for the current invocation.
    """

    @property
    def context(self) -> LambdaContext:
        """Get the Lambda context for the current invocation.

        Returns:
            The AWS Lambda context object.

        Raises:
            ValueError: If no context has been attached to this handler yet.
        """
        if not hasattr(self, CONTEXT_ATTR):
            raise ValueError(f"No Lambda context attached to {self.__class__.__name__}")
        return getattr(self, CONTEXT_ATTR)

    @context.setter
    def context(self, value: LambdaContext):
        """Attach the Lambda context of the current invocation.

        Args:
            value: The AWS Lambda context object to set.
        """
        setattr(self, CONTEXT_ATTR, value)

    @classmethod
    def handler_name(cls) -> str:
        """Get the name of this handler class.

        Returns:
            The class name as a string.
        """
        return cls.__name__

    @classmethod
    def service_name(cls) -> str:
        """Service name used for structured log records.

        Returns:
            "<SERVICE_NAME>.<HandlerClassName>"
        """
        return f"{SERVICE_NAME}.{cls.handler_name()}"
