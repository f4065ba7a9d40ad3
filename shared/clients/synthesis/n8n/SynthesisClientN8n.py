from shared.clients.synthesis.SynthesisClientInterface import SynthesisClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.synthesis import SynthesisRequest


class SynthesisClientN8n(SynthesisClientInterface):
    """Synthesis transport for an n8n webhook workflow."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._webhook_path = self.get_config_val("WEBHOOK_PATH", default="/webhook/maincore", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "N8n"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="WEBHOOK_PATH", val_type="string", default="/webhook/maincore"),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_synthesis(self) -> str:
        return self._webhook_path

    ################ PAYLOAD BUILDER ##################
    def get_synthesis_payload(self, request: SynthesisRequest, action: str) -> dict:
        """Build the n8n webhook body.

        The form fields travel camelCase next to the ``action`` tag, the ``type``
        discriminator and an ISO timestamp.

        Args:
            request (SynthesisRequest): The form data.
            action (str): The action tag.

        Returns:
            dict: {"fullName": "...", ..., "type": "cover_letter", "action": "maincore", "timestamp": "..."}
        """
        body = request.model_dump(by_alias=True)
        body["action"] = action
        body["timestamp"] = self.get_timestamp()
        return body
