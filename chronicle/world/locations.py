"""
Locations and the connections between them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import uuid


class LocationType(str, Enum):
    WILDERNESS = "wilderness"
    TOWN = "town"
    CITY = "city"
    DUNGEON = "dungeon"
    BUILDING = "building"
    ROOM = "room"
    ROAD = "road"
    CAVE = "cave"
    OTHER = "other"

    @classmethod
    def parse(cls, text: Optional[str]) -> "LocationType":
        if not text:
            return cls.OTHER
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass
class LocationConnection:
    destination_id: str
    destination_name: str
    direction: Optional[str] = None
    travel_time_minutes: int = 0


@dataclass
class Location:
    name: str
    location_type: LocationType = LocationType.OTHER
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    parent_location: Optional[str] = None
    connections: list[LocationConnection] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    npcs_present: list[str] = field(default_factory=list)

    def connect_to(
        self,
        other: "Location",
        direction: Optional[str] = None,
        travel_time_minutes: int = 0,
    ) -> None:
        """Add or replace the connection to other."""
        self.connections = [c for c in self.connections if c.destination_id != other.id]
        self.connections.append(
            LocationConnection(other.id, other.name, direction, travel_time_minutes)
        )

    def is_connected_to(self, name: str) -> bool:
        return any(c.destination_name.lower() == name.lower() for c in self.connections)
