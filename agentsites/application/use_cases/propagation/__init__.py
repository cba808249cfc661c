"""Propagation use cases: push an approved record to branch sites."""

from agentsites.application.use_cases.propagation.push_update import PushUpdateUseCase

__all__ = ["PushUpdateUseCase"]
