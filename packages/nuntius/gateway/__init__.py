from .client import EvolutionClient, MessageGateway

__all__ = ["EvolutionClient", "MessageGateway"]
