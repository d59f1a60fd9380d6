from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from aibs_informatics_core.executors.base import BaseExecutor
from aibs_informatics_core.models.base import ModelProtocol
from aibs_informatics_core.utils.json import JSON
from aws_lambda_powertools.utilities.typing import LambdaContext

from data_replication_aws_lambda.common.logging import LoggingMixins
from data_replication_aws_lambda.common.models import build_status_response

LambdaEvent = Union[JSON]  # type: ignore # https://github.com/python/mypy/issues/7866
LambdaHandlerType = Callable[[LambdaEvent, LambdaContext], Optional[JSON]]

REQUEST = TypeVar("REQUEST", bound=ModelProtocol)
RESPONSE = TypeVar("RESPONSE", bound=ModelProtocol)


@dataclass  # type: ignore[misc] # mypy #5374
class LambdaHandler(
    LoggingMixins,
    BaseExecutor[REQUEST, RESPONSE],
    Generic[REQUEST, RESPONSE],
):
    """Base class for the strongly typed replication handlers.

    Subclasses declare a REQUEST and RESPONSE model (both following `ModelProtocol`)
    and implement `handle`. The callable returned by `get_handler` takes care of
    logging setup, deserializing the event, and wrapping the serialized response
    in a ``{"statusCode": 200, "body": "<json>"}`` result.

    Example:
        ```python
        @dataclass
        class PingRequest(SchemaModel):
            name: str

        @dataclass
        class PingResponse(SchemaModel):
            message: str

        class PingHandler(LambdaHandler[PingRequest, PingResponse]):
            def handle(self, request: PingRequest) -> PingResponse:
                return PingResponse(message=f"pong {request.name}")

        handler = PingHandler.get_handler()
        ```
    """

    def __post_init__(self):
        self.context = LambdaContext()
        super().__post_init__()

    # --------------------------------------------------------------------
    # Handler provider methods
    # --------------------------------------------------------------------

    @classmethod
    def get_handler(cls, *args, **kwargs) -> LambdaHandlerType:
        """Create the Lambda entry point for this handler class.

        A fresh handler instance is constructed for every invocation, so nothing
        (clients, connections) is shared between concurrent invocations.

        Args:
            *args: Positional arguments passed to the handler constructor.
            **kwargs: Keyword arguments passed to the handler constructor.

        Returns:
            A callable suitable as an AWS Lambda handler.
        """

        logger = cls.get_logger(service=cls.service_name(), add_to_root=False)

        @logger.inject_lambda_context(log_event=True)
        def handler(event: LambdaEvent, context: LambdaContext) -> Optional[JSON]:
            lambda_handler = cls(*args, **kwargs)  # type: ignore[call-arg]
            logger.info(f"Instantiated {lambda_handler}.")
            lambda_handler.log = logger
            lambda_handler.context = context
            lambda_handler.add_logger_to_root()

            request = lambda_handler.deserialize_request(event)

            lambda_handler.log.info("Event successfully deserialized. Calling handler...")
            response = lambda_handler.handle(request=request)

            lambda_handler.log.info(f"Handler completed and returned: {response}")
            body = lambda_handler.serialize_response(response) if response else {}
            return build_status_response(body)

        return handler

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"request: {self.get_request_cls()}, "
            f"response: {self.get_response_cls()}"
            ")"
        )
