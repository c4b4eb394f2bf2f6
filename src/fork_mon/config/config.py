"""Monitor configuration loader.

Loads the monitor configuration from a YAML file:

    endpoints:
      - http://lighthouse:5052
      - http://teku:5051
    eth2:
      seconds_per_slot: 12
      genesis_time: 1606824023
      slots_per_epoch: 32
      network: mainnet
    output_dir: /public
    http_timeout_milliseconds: 500
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field, field_validator

from fork_mon.chain import Eth2Config
from fork_mon.types import StrictBaseModel


class ApiSettings(StrictBaseModel):
    """Where the dashboard HTTP server listens."""

    host: str = "0.0.0.0"
    """Host address to bind to."""

    port: int = Field(default=8080, ge=0, le=65535)
    """Port to listen on."""


class MonitorConfig(StrictBaseModel):
    """
    Everything the monitor needs to know about the nodes it watches.

    Each endpoint is the base URL of a beacon node REST API. Nodes that
    cannot be reached at startup are skipped, not retried.
    """

    endpoints: list[str] = Field(default_factory=list)
    """Base URLs of the beacon nodes to poll."""

    eth2: Eth2Config
    """Timing parameters of the monitored chain."""

    output_dir: str | None = None
    """Directory holding the compiled browser UI, served at /."""

    http_timeout_milliseconds: int = Field(default=500, gt=0)
    """Timeout of every request made to a beacon node."""

    api: ApiSettings = Field(default_factory=ApiSettings)
    """Dashboard server settings."""

    compact_summary: bool = False
    """Collapse single-child runs in the served fork choice tree."""

    align_to_slot: bool = True
    """Wait for the next slot boundary before polling starts."""

    @field_validator("endpoints")
    @classmethod
    def strip_trailing_slashes(cls, v: list[str]) -> list[str]:
        """Normalize endpoints so request paths can be appended directly."""
        return [endpoint.rstrip("/") for endpoint in v]

    @property
    def http_timeout(self) -> float:
        """Request timeout in seconds."""
        return self.http_timeout_milliseconds / 1000

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> MonitorConfig:
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, content: str) -> MonitorConfig:
        """
        Load configuration from a YAML string.

        Useful for testing or programmatic config generation.
        """
        data = yaml.safe_load(content)
        return cls.model_validate(data)
