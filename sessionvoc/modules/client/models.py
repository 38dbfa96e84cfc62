"""
SessionVOC wire models.

These models define the request bodies the client sends and the small
structured values it hands back to callers.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SessionPatch(BaseModel):
    """Body of a session update: the transient and user-data partitions only."""

    model_config = ConfigDict(extra="ignore")

    trans_data: Optional[Dict[str, Any]] = Field(None, alias="transData")
    user_data: Optional[Dict[str, Any]] = Field(None, alias="userData")

    @classmethod
    def from_input(cls, data: Union[str, bytes, Mapping[str, Any], BaseModel]) -> "SessionPatch":
        """
        Build a patch from a JSON string, a mapping or another model.

        Fields other than transData/userData (sid, urlSecret, ...) are dropped.

        Raises:
            json.JSONDecodeError: If a string input is not valid JSON
            pydantic.ValidationError: If a partition is not a JSON object
        """
        if isinstance(data, SessionPatch):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True)
        elif isinstance(data, (str, bytes)):
            data = json.loads(data)
        return cls.model_validate(data)

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LoginRequest(BaseModel):
    """Credentials for a challenge-less login."""

    uid: str = Field(..., description="User name")
    password: str = Field(..., description="Plain text password")


@dataclass(frozen=True)
class CreatedSession:
    """Outcome of a session creation: the new identifier and the full record."""

    sid: str
    record: Dict[str, Any]
