"""Trade models with JSON and Cap'n Proto encodings, plus helper value types (decimal, flags, UUID, Base64)."""

__version__ = "0.1.0"

__all__ = [
    "capnp_layout",
    "capnp_schema",
    "capnproto",
    "cli",
    "fbe_types",
    "trade",
]