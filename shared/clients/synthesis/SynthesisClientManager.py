from shared.helper.HelperConfig import HelperConfig
from shared.clients.synthesis.SynthesisClientInterface import SynthesisClientInterface


class SynthesisClientManager:
    """Manager class to instantiate the configured synthesis client."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Read the synthesis engine name from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "N8n").
        """
        engine = self.helper_config.get_string_val("SYNTHESIS_ENGINE", default="n8n")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> SynthesisClientInterface:
        """Instantiate the synthesis client for the configured engine.

        Returns:
            SynthesisClientInterface: The instantiated client.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"SynthesisClient{engine}"
        try:
            module = __import__(
                f"shared.clients.synthesis.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
            client = client_class(helper_config=self.helper_config)
            self.logging.debug("Instantiated synthesis client for engine: %s", engine)
            return client
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported synthesis engine '%s'. Error: %s" % (engine, e))

    def get_client(self) -> SynthesisClientInterface:
        """Return the instantiated synthesis client."""
        return self.client
