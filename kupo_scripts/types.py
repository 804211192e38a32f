"""
Script types for the Kupo script client.

Script and ScriptLanguage, their Kupo wire JSON, and the script hash.
Uses pycardano for the Cardano-side script and hash types.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from nacl.encoding import RawEncoder
from nacl.hash import blake2b
from pycardano import NativeScript, PlutusV1Script, PlutusV2Script, PlutusV3Script, ScriptHash
from pycardano.exception import DeserializeException
from pycardano.hash import SCRIPT_HASH_SIZE

_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")


class ScriptError(ValueError):
    """Base exception for script value errors."""


class DecodeError(ScriptError):
    """Wire JSON could not be decoded into a Script."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class HexDecodeError(ScriptError):
    """Script body is not valid hex."""

    def __init__(self, message: str, script: str = ""):
        super().__init__(message)
        self.script = script


class ScriptConversionError(ScriptError):
    """Script bytes are not a valid pycardano script."""


class ScriptLanguage(Enum):
    """
    Script language tag.

    Each member is one (wire string, hash discriminator) row. Kupo and every
    script hash computed so far depend on these values; never renumber.
    """
    NATIVE = ("native", 0x00)
    PLUTUS_V1 = ("plutus:v1", 0x01)
    PLUTUS_V2 = ("plutus:v2", 0x02)
    PLUTUS_V3 = ("plutus:v3", 0x03)

    def __init__(self, wire: str, discriminator: int):
        self.wire = wire
        self.discriminator = discriminator

    @classmethod
    def from_wire(cls, value: Any) -> "ScriptLanguage":
        """Exact, case-sensitive match against the wire strings."""
        for language in cls:
            if language.wire == value:
                return language
        raise DecodeError(f"unknown script language version: '{value}'", value=value)

    def __str__(self) -> str:
        return self.wire


# blake2b-224 at fixed parameters; a broken primitive is an environment defect
if len(blake2b(bytes(1), SCRIPT_HASH_SIZE, encoder=RawEncoder)) != SCRIPT_HASH_SIZE:
    raise RuntimeError("unexpected error generating empty blake2b hash")


@dataclass(frozen=True)
class Script:
    """
    An on-chain script as served by Kupo.

    Script is stored as hex exactly as received. It is only validated when
    converted to bytes, so a script with a malformed body still decodes and
    fails later in hash().
    """
    language: ScriptLanguage
    script: str  # hex encoded

    def to_dict(self) -> dict:
        return {"Language": self.language.wire, "Script": self.script}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Script":
        """Decode the {"Language": ..., "Script": ...} wire object."""
        if not isinstance(data, Mapping):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}", value=data)
        language = ScriptLanguage.from_wire(data.get("Language", ""))
        script = data.get("Script", "")
        if not isinstance(script, str):
            raise DecodeError(f"script must be a string, got {type(script).__name__}", value=script)
        return cls(language=language, script=script)

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Script":
        try:
            obj = json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(f"invalid script JSON: {e}", value=data) from e
        return cls.from_dict(obj)

    def to_bytes(self) -> bytes:
        """Raw script bytes. Raises HexDecodeError for malformed hex."""
        if not _HEX.fullmatch(self.script):
            raise HexDecodeError(f"invalid hex script body: '{self.script[:32]}'", script=self.script)
        return bytes.fromhex(self.script)

    def hash(self) -> bytes:
        """
        Script hash: blake2b-224 of the language discriminator byte followed
        by the raw script bytes.
        """
        return blake2b(
            bytes([self.language.discriminator]) + self.to_bytes(),
            SCRIPT_HASH_SIZE,
            encoder=RawEncoder,
        )

    def hash_hex(self) -> str:
        return self.hash().hex()

    def to_script_hash(self) -> ScriptHash:
        return ScriptHash(self.hash())

    def to_pycardano(self) -> Union[NativeScript, PlutusV1Script, PlutusV2Script, PlutusV3Script]:
        """Convert to the matching pycardano script object."""
        raw = self.to_bytes()
        if self.language is ScriptLanguage.NATIVE:
            try:
                return NativeScript.from_cbor(raw)
            except (DeserializeException, ValueError) as e:
                raise ScriptConversionError(f"invalid native script CBOR: {e}") from e
        if self.language is ScriptLanguage.PLUTUS_V1:
            return PlutusV1Script(raw)
        if self.language is ScriptLanguage.PLUTUS_V2:
            return PlutusV2Script(raw)
        return PlutusV3Script(raw)

    def __str__(self) -> str:
        return f"{self.language} script ({len(self.script) // 2} bytes)"

    def __repr__(self) -> str:
        return f"Script({self.language.wire}, {self.script[:16]}{'..' if len(self.script) > 16 else ''})"
