"""Results of locating a document inside a response envelope."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class DirectBinary(BaseModel):
    """The response itself is the binary document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["direct_binary"] = "direct_binary"
    content: bytes


class Candidate(BaseModel):
    """A string suspected, but not yet verified, to be an encoded document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["candidate"] = "candidate"
    raw: str


class ServerError(BaseModel):
    """The upstream workflow explicitly reported a failure."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["server_error"] = "server_error"
    message: str


class NotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["not_found"] = "not_found"


LocateResult = Annotated[Union[DirectBinary, Candidate, ServerError, NotFound], Field(discriminator="kind")]
