from pathlib import Path
from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from channel_graph.errors import TopologyValidationError


SAMPLE_TOPOLOGY_PATH = Path(__file__).resolve().parent / "data" / "sample.json"


class Channel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    channel_name: str = Field(alias="channelName")
    tx_identifiers: List[str] = Field(alias="txIdentifiers")
    rx_identifiers: List[str] = Field(alias="rxIdentifiers")


class Server(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    server_id: str = Field(alias="serverId")
    server_name: str = Field(alias="serverName")
    server_address: str = Field(alias="serverAddress")
    channels: List[Channel]


class Topology(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    servers: List[Server]


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{location}: {error.get('msg', 'invalid value')}"


def parse_topology(data: Union[Topology, dict, Any]) -> Topology:
    """
    Coerce a mapping into a Topology.
    Shape problems become a TopologyValidationError listing every bad field.
    """
    if isinstance(data, Topology):
        return data

    try:
        return Topology.model_validate(data)
    except ValidationError as e:
        raise TopologyValidationError(
            "Topology description is malformed",
            [_describe(err) for err in e.errors()],
        ) from e


def load_topology(path: Union[str, Path]) -> Topology:
    """Read a topology JSON document from disk."""
    raw = Path(path).read_text(encoding="utf-8")
    try:
        return Topology.model_validate_json(raw)
    except ValidationError as e:
        raise TopologyValidationError(
            f"Topology file {path} is malformed",
            [_describe(err) for err in e.errors()],
        ) from e


def load_sample_topology() -> Topology:
    return load_topology(SAMPLE_TOPOLOGY_PATH)
