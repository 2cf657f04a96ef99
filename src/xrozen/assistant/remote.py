"""Assistant served by a hosted edge function."""

import logging

from pydantic import ValidationError

from ..backend.http import HostedClient
from ..errors import TransportError
from .base import AssistantFunction
from .models import AssistantRequest, AssistantResponse

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_NAME = "xrozen-ai"


class RestAssistantFunction(AssistantFunction):
    """Invokes ``POST /functions/v1/<name>`` on the hosted project.

    The HTTP client is shared with the other hosted collaborators and is
    closed by whoever created it.
    """

    def __init__(self, client: HostedClient, function_name: str = DEFAULT_FUNCTION_NAME):
        self._client = client
        self._path = f"/functions/v1/{function_name}"

    async def invoke(self, request: AssistantRequest) -> AssistantResponse:
        logger.debug(
            "Invoking %s (conversation=%s, history=%d)",
            self._path, request.conversation_id, len(request.messages),
        )
        response = await self._client.request("POST", self._path, json=request.to_payload())
        try:
            return AssistantResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(f"Malformed assistant response: {e}") from e
