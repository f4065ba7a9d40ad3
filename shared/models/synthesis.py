"""Generation request sent to the synthesis workflow."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.models.history import HistoryCategory


class SynthesisRequest(BaseModel):
    """
    Form data forwarded to the synthesis workflow.

    Field contents are passed through untouched; the workflow owns their meaning.
    On the wire the fields are camelCase and the category travels as ``type``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: HistoryCategory = Field(default="cover_letter", alias="type")
    full_name: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    country: str = ""
    address: str = ""
    job_posting: str = ""
    resume_text: str = ""
    company_name: str = ""
    job_title: str = ""
    resume_attachment: str = ""
    resume_file_name: str = "none"
