"""
Network payloads.

Only the fields the client relies on are declared; everything else the
service sends is kept as extra fields and written back unchanged.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Device(_Payload):
    """Network device running configuration."""

    name: str
    type_: Optional[str] = Field(default=None, alias="type")
    state: Optional[str] = None


class NetworkConnection(_Payload):
    """Network connection settings, keyed by id."""

    id: str
    interface: Optional[str] = None
    method4: Optional[str] = None
    method6: Optional[str] = None
    addresses: list[str] = Field(default_factory=list)
    nameservers: list[str] = Field(default_factory=list)
    gateway4: Optional[str] = None
    gateway6: Optional[str] = None


class NetworkSettings(_Payload):
    """General network settings."""

    hostname: Optional[str] = None
    wireless_enabled: Optional[bool] = None
    networking_enabled: Optional[bool] = None
    connectivity: Optional[bool] = None


class AccessPoint(_Payload):
    """Visible wireless access point."""

    ssid: str
    hw_address: Optional[str] = None
    strength: int = 0
    flags: int = 0
    wpa_flags: int = 0
    rsn_flags: int = 0
