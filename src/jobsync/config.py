"""
Run configuration and service-account credential loading.

Everything the sync needs from the environment is read once into a
``SyncConfig`` at process start and handed to each component explicitly.
"""

import json
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


ENV_GOOGLE_CREDENTIALS = "GOOGLE_CREDENTIALS"
ENV_RAPIDAPI_KEY = "RAPIDAPI_KEY"
ENV_SPREADSHEET_ID = "SPREADSHEET_ID"


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or malformed."""
    pass


class ServiceAccountCredential(BaseModel):
    """The two fields of a service-account key file used for signing."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    client_email: str = Field(..., min_length=1)
    private_key: str = Field(..., min_length=1)


class SearchParams(BaseModel):
    """Fixed query sent to the job-search endpoint."""
    model_config = ConfigDict(frozen=True)

    keywords: str = "software intern"
    location_id: str = "103644278"
    date_posted: str = "past24Hours"
    title_ids: str = "4171"
    sort: str = "mostRelevant"
    page: int = 1

    def to_query(self) -> dict:
        """Query-string parameters in the API's naming."""
        return {
            "keywords": self.keywords,
            "locationId": self.location_id,
            "datePosted": self.date_posted,
            "titleIds": self.title_ids,
            "sort": self.sort,
            "page": self.page,
        }


def load_credential(raw: Optional[str]) -> ServiceAccountCredential:
    """
    Parse a serialized service-account JSON blob.

    Args:
        raw: Contents of the key file, usually from GOOGLE_CREDENTIALS

    Returns:
        ServiceAccountCredential with client_email and private_key

    Raises:
        ConfigurationError: If the value is absent, not JSON, or lacks
            either required field
    """
    if not raw or not raw.strip():
        raise ConfigurationError(f"{ENV_GOOGLE_CREDENTIALS} is not set")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{ENV_GOOGLE_CREDENTIALS} is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"{ENV_GOOGLE_CREDENTIALS} must be a JSON object")

    try:
        return ServiceAccountCredential.model_validate(payload)
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigurationError(
            f"{ENV_GOOGLE_CREDENTIALS} is missing required fields: {missing}"
        ) from e


class SyncConfig(BaseModel):
    """
    Settings for one sync run.

    Values are optional at construction time; ``require()`` raises when a
    component asks for one that was never provided, so a missing setting
    fails at first use rather than at startup.
    """

    google_credentials: Optional[str] = None
    rapidapi_key: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    timeout: float = 30.0
    search: SearchParams = Field(default_factory=SearchParams)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "SyncConfig":
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            **overrides: Explicit values that win over the environment
        """
        if environ is None:
            environ = os.environ

        values = {
            "google_credentials": environ.get(ENV_GOOGLE_CREDENTIALS),
            "rapidapi_key": environ.get(ENV_RAPIDAPI_KEY),
            "spreadsheet_id": environ.get(ENV_SPREADSHEET_ID),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require(self, field_name: str) -> str:
        """Return a setting or raise ConfigurationError if it is empty."""
        value = getattr(self, field_name)
        if not value:
            env_name = {
                "google_credentials": ENV_GOOGLE_CREDENTIALS,
                "rapidapi_key": ENV_RAPIDAPI_KEY,
                "spreadsheet_id": ENV_SPREADSHEET_ID,
            }.get(field_name, field_name)
            raise ConfigurationError(f"{env_name} is not set")
        return value

    def credential(self) -> ServiceAccountCredential:
        """Parse the configured service-account credential."""
        return load_credential(self.google_credentials)
