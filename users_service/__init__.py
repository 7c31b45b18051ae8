"""Users service: user identity records, credential checks and the RPC surface."""

__version__ = "0.1.0"
