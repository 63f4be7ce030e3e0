# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/bootstrap/models.py

from __future__ import annotations

import ipaddress
import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from vrboot.errors import MalformedBootstrapError
from vrboot.utils.net import canonical_mac, netmask_to_prefix

# the key fields end up unquoted in a vbash script
KEY_FIELD_RE = re.compile(r"^[A-Za-z0-9@._+/=:-]+$")


@dataclass(frozen=True)
class SshPublicKey:
    key_type: str      # e.g. ssh-rsa
    key: str           # base64 key material
    comment: str       # used as the key id on the appliance

    @classmethod
    def parse(cls, value: str) -> "SshPublicKey":
        parts = (value or "").split()
        if not parts:
            raise ValueError("publicKey is empty")
        if len(parts) != 3:
            raise ValueError(
                f"publicKey must be '<type> <key> <comment>', got {len(parts)} field(s)"
            )
        for name, part in zip(("type", "key", "comment"), parts):
            if not KEY_FIELD_RE.match(part):
                raise ValueError(f"publicKey {name} contains unsupported characters: {part!r}")
        return cls(*parts)


class NicSpec(BaseModel):
    """One interface as described by the hypervisor."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    mac: str
    ip: str
    netmask: str
    gateway: Optional[str] = None
    # presence flag: any value, even false or null, marks the default route
    is_default_route: bool = Field(default=False, alias="isDefaultRoute")

    @model_validator(mode="before")
    @classmethod
    def _presence_flags(cls, data: Any) -> Any:
        if isinstance(data, dict) and "isDefaultRoute" in data:
            data = {**data, "isDefaultRoute": True}
        return data

    @field_validator("mac")
    @classmethod
    def _mac(cls, v: str) -> str:
        return canonical_mac(v)

    @field_validator("ip", "gateway")
    @classmethod
    def _ipv4(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return str(ipaddress.IPv4Address(v.strip()))

    @field_validator("netmask")
    @classmethod
    def _netmask(cls, v: str) -> str:
        netmask_to_prefix(v)
        return v.strip()

    @property
    def prefix(self) -> int:
        return netmask_to_prefix(self.netmask)

    @property
    def cidr(self) -> str:
        return f"{self.ip}/{self.prefix}"


class BootstrapDocument(BaseModel):
    """
    The payload delivered over the virtio channel.

    Unknown keys are ignored; the hypervisor sends more than the boot agent
    consumes.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    public_key: str = Field(alias="publicKey")
    management_nic: NicSpec = Field(alias="managementNic")
    additional_nics: List[NicSpec] = Field(default_factory=list, alias="additionalNics")
    ssh_port: StrictInt = Field(alias="sshPort", gt=0, le=65535)

    @field_validator("public_key")
    @classmethod
    def _public_key(cls, v: str) -> str:
        SshPublicKey.parse(v)
        return v.strip()

    @field_validator("ssh_port", mode="before")
    @classmethod
    def _integral_port(cls, v: Any) -> Any:
        # JSON numbers may arrive as 22.0; strings and booleans are refused
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @field_validator("additional_nics", mode="before")
    @classmethod
    def _null_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def ssh_key(self) -> SshPublicKey:
        return SshPublicKey.parse(self.public_key)

    def nics(self) -> List[NicSpec]:
        """Management NIC first, then the additional NICs in document order."""
        return [self.management_nic, *self.additional_nics]


def _describe(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<document>"
        problems.append(f"{loc}: {err['msg']}")
    return "; ".join(problems)


def parse_bootstrap_document(content: Union[str, bytes]) -> BootstrapDocument:
    """Decode and validate raw channel content; raises MalformedBootstrapError."""
    text = content.decode("utf-8", "replace") if isinstance(content, bytes) else content
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedBootstrapError(f"unable to JSON parse bootstrap info ({exc}):\n {text}") from exc

    try:
        return BootstrapDocument.model_validate(data)
    except ValidationError as exc:
        raise MalformedBootstrapError(f"invalid bootstrap info: {_describe(exc)}") from exc
