from abc import abstractmethod
from datetime import datetime, timezone

import httpx
from httpx._types import QueryParamTypes

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.envelope import BinaryPayload, ResponseEnvelope, TextPayload
from shared.models.synthesis import SynthesisRequest

# content types the workflow uses when it answers with the document itself
BINARY_CONTENT_TYPES = ("application/pdf", "application/octet-stream")


class SynthesisTransportError(Exception):
    """The synthesis workflow could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SynthesisClientInterface(ClientInterface):
    """HTTP transport to the document synthesis workflow.

    Returns the raw response as a ``ResponseEnvelope``; interpreting it is the
    payload locator's job. The transport never retries.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)
        self.default_action = helper_config.get_string_val(f"{self.get_client_type().upper()}_DEFAULT_ACTION", default="maincore")
        self._client: httpx.AsyncClient | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "synthesis"

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns the authentication header for the workflow endpoint, if a key is configured.

        Returns:
            dict: A dictionary containing the auth data
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns the base URL of the workflow server (e.g. "https://n8n.example.com").
        """
        pass

    @abstractmethod
    def _get_endpoint_synthesis(self) -> str:
        """
        Returns the endpoint path that generates documents (e.g. "/webhook/<id>").
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_synthesis_payload(self, request: SynthesisRequest, action: str) -> dict:
        """Build the backend-specific request body for a generation request.

        Args:
            request (SynthesisRequest): The form data to forward.
            action (str): The action tag the workflow dispatches on.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_envelope(self, response: httpx.Response) -> ResponseEnvelope:
        """Wrap a successful HTTP response into a response envelope.

        Args:
            response (httpx.Response): The workflow's answer.

        Returns:
            ResponseEnvelope: BinaryPayload for document content types, TextPayload otherwise.
        """
        content_type = response.headers.get("content-type", "").lower()
        if any(binary_type in content_type for binary_type in BINARY_CONTENT_TYPES):
            return BinaryPayload(content=response.content, content_type=content_type)
        return TextPayload(text=response.text)

    @staticmethod
    def get_timestamp() -> str:
        return datetime.now(timezone.utc).isoformat()

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_synthesize(self, request: SynthesisRequest, action: str | None = None) -> ResponseEnvelope:
        """Submit a generation request and return the unparsed response.

        Args:
            request (SynthesisRequest): The form data to forward.
            action (str | None): Action tag, defaults to SYNTHESIS_DEFAULT_ACTION.

        Returns:
            ResponseEnvelope: The workflow response.

        Raises:
            SynthesisTransportError: On network failure or non-2xx status.
        """
        body = self.get_synthesis_payload(request, action or self.default_action)
        self.logging.info(
            "Requesting %s from %s workflow (action=%s)...",
            request.category,
            self.get_engine_name(),
            body.get("action"),
        )
        try:
            response = await self.do_request(
                method="POST",
                endpoint=self._get_endpoint_synthesis(),
                json=body,
                additional_headers={"Accept": "application/json, application/pdf, */*"},
            )
        except httpx.RequestError as e:
            self.logging.error("Synthesis workflow not reachable: %s", e)
            raise SynthesisTransportError(
                "Network Error: could not connect to the synthesis workflow. Ensure the server is online."
            ) from e

        if not response.is_success:
            self.logging.error(
                "Synthesis request failed with status %d: %s",
                response.status_code,
                response.text[:200],
            )
            if response.status_code == 500:
                raise SynthesisTransportError(
                    "Synthesis workflow internal error (500). Ensure the workflow is active.",
                    status_code=500,
                )
            raise SynthesisTransportError(
                f"Synthesis failed: server returned status {response.status_code}.",
                status_code=response.status_code,
            )

        return self.extract_envelope(response)

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        """Initialise the HTTP client."""
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        json: dict | None = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
    ) -> httpx.Response:
        """Send an HTTP request to the workflow server.

        Args:
            method: HTTP method (GET, POST, …).
            json: JSON-serialisable body (sets Content-Type automatically).
            params: URL query parameters.
            endpoint: Path to append to the base URL (leading slash optional).
            additional_headers: Extra headers that override the defaults.

        Returns:
            The raw httpx.Response, whatever its status.

        Raises:
            SynthesisTransportError: If the client is not initialised.
            httpx.RequestError: If the request cannot be sent.
        """
        if self._client is None:
            raise SynthesisTransportError("HTTP client not initialised. Call boot() before making requests.")

        endpoint = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""

        headers: dict = {}
        headers.update(self._get_auth_header())
        if additional_headers:
            headers.update(additional_headers)

        kwargs: dict = {
            "url": f"{self._get_base_url().rstrip('/')}{endpoint}",
            "headers": headers,
            "timeout": self.timeout,
            "params": params,
        }
        if json is not None:
            kwargs["json"] = json

        return await self._client.request(method, **kwargs)
