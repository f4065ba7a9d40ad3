from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter a client reads from the environment.

    Attributes:
        env_key (str): The raw key, prefixed by the client as "<TYPE>_<ENGINE>_<KEY>".
        val_type (str): The expected value type ("string", "number" or "bool").
        default (str | int | float | bool | None): Fallback if the variable is not set. None marks the value as required.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | None = None
