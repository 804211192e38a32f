"""
Kupo script client.

Structure:
    kupo_scripts/
    ├── types.py          # Script, ScriptLanguage, script hash
    └── indexer/          # Kupo HTTP client

Usage:
    from kupo_scripts import Script, ScriptLanguage
    from kupo_scripts.indexer import KupoClient
"""

from .types import DecodeError, HexDecodeError, Script, ScriptConversionError, ScriptError, ScriptLanguage

__all__ = [
    # Types
    "Script",
    "ScriptLanguage",
    # Errors
    "ScriptError",
    "DecodeError",
    "HexDecodeError",
    "ScriptConversionError",
]
