"""
Endpoint collection loading.

A collection file (YAML or JSON) lists the endpoints that become rooms plus
session-wide auth and variables:

    name: Petstore
    variables:
      baseUrl: https://petstore.example.com
    auth:
      type: bearer
      token: "{{token}}"
    endpoints:
      - id: list-pets
        name: List pets
        method: GET
        url: "{{baseUrl}}/pets"
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .models import AuthConfig, Endpoint, EndpointCollection

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


class EndpointModel(BaseModel):
    """One endpoint entry in a collection file."""

    id: Optional[str] = Field(default=None, description="Stable identifier; defaults to the entry's position")
    name: str = Field(..., description="Human readable name")
    method: str = Field("GET", description="HTTP method")
    url: str = Field(..., description="URL template, may contain {{variables}}")
    description: Optional[str] = Field(default=None)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Union[Dict[str, Any], List[Any], str]] = Field(default=None)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        method = v.strip().upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{v}'")
        return method

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("url must not be blank")
        return v.strip()


class AuthModel(BaseModel):
    type: Literal["none", "bearer", "basic", "apikey"] = "none"
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    location: Literal["header", "query"] = "header"


class CollectionModel(BaseModel):
    name: str = Field("Untitled collection")
    endpoints: List[EndpointModel] = Field(default_factory=list)
    auth: AuthModel = Field(default_factory=AuthModel)
    variables: Dict[str, str] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def stringify_variables(cls, v: Any) -> Any:
        # YAML turns ports and ids into ints
        if isinstance(v, dict):
            return {str(k): "" if val is None else str(val) for k, val in v.items()}
        return v

    def to_collection(self) -> EndpointCollection:
        endpoints = tuple(
            Endpoint(
                id=e.id or f"endpoint-{i + 1}",
                name=e.name,
                method=e.method,
                url=e.url,
                description=e.description,
                headers=dict(e.headers),
                body=e.body,
            )
            for i, e in enumerate(self.endpoints)
        )
        return EndpointCollection(
            name=self.name,
            endpoints=endpoints,
            auth=AuthConfig(**self.auth.model_dump()),
            variables=dict(self.variables),
        )


def parse_collection(raw: Any, source: str = "<memory>") -> EndpointCollection:
    """Validate a decoded collection document and convert it to engine types."""
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Collection {source} must be a mapping at the top level")
    try:
        model = CollectionModel.model_validate(raw)
    except ValidationError as e:
        for err in e.errors():
            logger.error("Collection validation error at %s: %s", list(err["loc"]), err["msg"])
        raise ConfigurationError(f"Collection {source} is invalid: {e.error_count()} error(s)") from e
    collection = model.to_collection()
    if not collection.endpoints:
        raise ConfigurationError(f"Collection {source} has no endpoints; nothing to explore")
    ids = [e.id for e in collection.endpoints]
    if len(set(ids)) != len(ids):
        raise ConfigurationError(f"Collection {source} has duplicate endpoint ids")
    return collection


def load_collection(path: Union[str, Path]) -> EndpointCollection:
    """Load an endpoint collection from a .yaml/.yml or .json file."""
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Collection file not found: {p}")
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not parse collection {p}: {e}") from e
    collection = parse_collection(raw, source=str(p))
    logger.info("Loaded collection '%s' with %d endpoints from %s", collection.name, len(collection.endpoints), p)
    return collection
