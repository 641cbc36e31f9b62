"""Rate providers for lending-protocol asset parameters."""

from src.data.provider_factory import create_provider

__all__ = ["create_provider"]
