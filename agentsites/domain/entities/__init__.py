"""Domain entities."""

from agentsites.domain.entities.propagation import PropagationRecordEntity

__all__ = ["PropagationRecordEntity"]
