"""attestation-abi - ABIProvider code generator for Cairo attestation structs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("attestation-abi")
except PackageNotFoundError:
    __version__ = "(local)"
