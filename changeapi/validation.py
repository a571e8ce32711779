"""
Change request validation

A change request is checked by a fixed chain of rules. The rules run in
order and the first one that fails decides the error returned to the
client, nothing after it is evaluated:

1. the body decodes into the ``Change`` shape      -> invalid_request
2. ``kind`` is "Change"                            -> invalid_kind
3. ``apiVersion`` is set                           -> missing_api_version
4. ``spec.prompt`` is set                          -> missing_prompt
5. ``spec.repos`` holds at least one repository    -> missing_repos
6. ``spec.agent`` is set                           -> missing_agent
7. ``spec.agent`` is a known agent                 -> invalid_agent

A request passing all rules gets its branch defaulted to "main" and is
returned as accepted.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import ValidationError

from changeapi.change_request import (
    CHANGE_KIND,
    DEFAULT_BRANCH,
    Agent,
    Change,
)

log = logging.getLogger("changeapi.change")


class ErrorCode(str, Enum):
    INVALID_REQUEST = "invalid_request"
    INVALID_KIND = "invalid_kind"
    MISSING_API_VERSION = "missing_api_version"
    MISSING_PROMPT = "missing_prompt"
    MISSING_REPOS = "missing_repos"
    MISSING_AGENT = "missing_agent"
    INVALID_AGENT = "invalid_agent"


class Rejected:
    """A change request that failed validation"""

    accepted = False

    def __init__(self, error: ErrorCode, message: str):
        self.error = error
        self.message = message

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {"error": self.error.value, "message": self.message}

    def __eq__(self, other):
        return (
            isinstance(other, Rejected)
            and self.error == other.error
            and self.message == other.message
        )

    def __repr__(self):
        return f"Rejected({self.error.value!r}, {self.message!r})"


class Accepted:
    """A change request that passed validation, with its branch defaulted"""

    accepted = True

    def __init__(self, change: Change):
        self.change = change

    def to_dict(self):
        return {
            "status": "accepted",
            "message": "Change request received successfully",
            "change": self.change.to_dict(),
        }

    def __eq__(self, other):
        return isinstance(other, Accepted) and self.change == other.change

    def __repr__(self):
        return f"Accepted({self.change!r})"


ValidationResult = Union[Accepted, Rejected]


def check_kind(change: Change) -> Optional[Rejected]:
    if change.kind != CHANGE_KIND:
        return Rejected(ErrorCode.INVALID_KIND, f"kind must be '{CHANGE_KIND}'")
    return None


def check_api_version(change: Change) -> Optional[Rejected]:
    if not change.api_version:
        return Rejected(ErrorCode.MISSING_API_VERSION, "apiVersion is required")
    return None


def check_prompt(change: Change) -> Optional[Rejected]:
    if not change.spec.prompt:
        return Rejected(ErrorCode.MISSING_PROMPT, "spec.prompt is required")
    return None


def check_repos(change: Change) -> Optional[Rejected]:
    if not change.spec.repos:
        return Rejected(
            ErrorCode.MISSING_REPOS,
            "spec.repos must contain at least one repository",
        )
    return None


def check_agent_present(change: Change) -> Optional[Rejected]:
    if not change.spec.agent:
        return Rejected(ErrorCode.MISSING_AGENT, "spec.agent is required")
    return None


def check_agent_known(change: Change) -> Optional[Rejected]:
    if not Agent.is_valid(change.spec.agent):
        allowed = " or ".join(f"'{agent}'" for agent in Agent.values())
        return Rejected(
            ErrorCode.INVALID_AGENT, f"spec.agent must be either {allowed}"
        )
    return None


Rule = Callable[[Change], Optional[Rejected]]

# Evaluation order decides which error a client sees first
RULES: tuple[Rule, ...] = (
    check_kind,
    check_api_version,
    check_prompt,
    check_repos,
    check_agent_present,
    check_agent_known,
)

# Field reported in the log line of each rejection
REJECTED_FIELD = {
    ErrorCode.INVALID_KIND: ("kind", lambda c: c.kind),
    ErrorCode.MISSING_API_VERSION: ("apiVersion", lambda c: c.api_version),
    ErrorCode.MISSING_PROMPT: ("prompt", lambda c: c.spec.prompt),
    ErrorCode.MISSING_REPOS: ("repos", lambda c: c.spec.repos),
    ErrorCode.MISSING_AGENT: ("agent", lambda c: c.spec.agent),
    ErrorCode.INVALID_AGENT: ("agent", lambda c: c.spec.agent),
}


class ChangeValidator:
    """
    Validates change requests.

    The validator keeps no state between calls besides its logger, a single
    instance can serve concurrent requests.
    """

    def __init__(self, log: logging.Logger = log):
        self.log = log

    def parse(self, payload: Union[str, bytes, dict]) -> Union[Change, Rejected]:
        """
        Decode a payload into a ``Change``.

        Args:
            payload: raw JSON body, or an already decoded JSON value

        Returns:
            Change on success, otherwise a Rejected with ``invalid_request``
        """
        try:
            if isinstance(payload, (str, bytes, bytearray)):
                return Change.model_validate_json(payload)
            return Change.model_validate(payload)
        except ValidationError as e:
            self.log.error(f"Failed to parse change request: {e}")
            return Rejected(ErrorCode.INVALID_REQUEST, str(e))

    def check(self, change: Change) -> ValidationResult:
        """Run the rule chain on a parsed change request"""
        for rule in RULES:
            rejected = rule(change)
            if rejected is not None:
                name, value = REJECTED_FIELD[rejected.error]
                self.log.warning(
                    f"Change request rejected error={rejected.error.value} "
                    f"{name}={value(change)!r}"
                )
                return rejected

        if not change.spec.branch:
            self.log.info(f"Using default branch branch={DEFAULT_BRANCH}")
            change = change.with_default_branch()

        self.log.info(
            "Change request received "
            f"prompt={change.spec.prompt!r} repos={change.spec.repos} "
            f"agent={change.spec.agent} branch={change.spec.branch}"
        )
        return Accepted(change)

    def validate(self, payload: Union[str, bytes, dict, Change]) -> ValidationResult:
        """
        Validate a change request.

        Instead of collecting every problem, validation stops at the first
        failing rule so clients always get a single error code.

        Args:
            payload: raw JSON body, decoded JSON value or parsed Change

        Returns:
            Accepted with the normalized change, or Rejected
        """
        if isinstance(payload, Change):
            change = payload
        else:
            change = self.parse(payload)
            if isinstance(change, Rejected):
                return change

        return self.check(change)


_validator: Optional[ChangeValidator] = None


def get_change_validator() -> ChangeValidator:
    """Get the shared validator instance"""
    global _validator
    if _validator is None:
        _validator = ChangeValidator()
    return _validator
