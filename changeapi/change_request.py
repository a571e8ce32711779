"""
Change request model.

The model only describes the wire shape of a request: which fields exist
and which primitive types they carry. Absent fields fall back to empty
values so that the validator can report them with a specific error code
instead of a generic parse error. Content rules (allowed kind, allowed
agents, non-empty fields) live in ``changeapi.validation``.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

CHANGE_KIND = "Change"
DEFAULT_BRANCH = "main"


class Agent(str, Enum):
    """Automation tools a change can be assigned to"""

    COPILOT_CLI = "copilot-cli"
    GEMINI_CLI = "gemini-cli"

    @classmethod
    def values(cls) -> list[str]:
        return [agent.value for agent in cls]

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls.values()


class ChangeSpec(BaseModel):
    """Parameters of a change"""

    prompt: Annotated[
        StrictStr,
        Field(
            examples=["Add comprehensive error handling to all API endpoints"],
            description="""
                Free-form description of the requested code modification.
            """.strip(),
        ),
    ] = ""

    repos: Annotated[
        list[StrictStr],
        Field(
            examples=[["https://github.com/myorg/repo1"]],
            description="""
                Repositories the change applies to. At least one is required,
                entries are passed through without further checks.
            """.strip(),
        ),
    ] = []

    agent: Annotated[
        StrictStr,
        Field(
            examples=Agent.values(),
            description="""
                Automation tool that would carry out the change. Must be one
                of the known agents.
            """.strip(),
        ),
    ] = ""

    branch: Annotated[
        Optional[StrictStr],
        Field(
            examples=["main", "feature/error-handling"],
            description=f"""
                Branch to work on. Defaults to '{DEFAULT_BRANCH}' when
                missing or empty.
            """.strip(),
        ),
    ] = None


class Change(BaseModel):
    """A single change request as submitted to ``POST /change``"""

    model_config = ConfigDict(populate_by_name=True)

    kind: Annotated[
        StrictStr,
        Field(
            examples=[CHANGE_KIND],
            description="Request kind, always 'Change'.",
        ),
    ] = ""

    api_version: Annotated[
        StrictStr,
        Field(
            alias="apiVersion",
            examples=["v1"],
            description="API version of the request, accepted verbatim.",
        ),
    ] = ""

    spec: ChangeSpec = Field(default_factory=ChangeSpec)

    def with_default_branch(self) -> "Change":
        """Return a copy with an empty branch replaced by the default one"""
        if self.spec.branch:
            return self.model_copy(deep=True)

        spec = self.spec.model_copy(update={"branch": DEFAULT_BRANCH})
        return self.model_copy(update={"spec": spec}, deep=True)

    def to_dict(self) -> dict:
        """Convert to dictionary using the wire field names"""
        return self.model_dump(by_alias=True)
