"""Translation gateway interface."""

from abc import ABC, abstractmethod

from attendql.core.types import TranslationResult


class TranslationGateway(ABC):
    """Interface for services that complete a translation prompt.

    Implementations make exactly one attempt per call and never raise for
    service failures: they return a TranslationFailure instead. Retry
    policy belongs to whoever calls the pipeline.
    """

    @abstractmethod
    def translate(self, prompt: str) -> TranslationResult:
        """Complete a prompt.

        Args:
            prompt: Translation prompt text.

        Returns:
            TranslationSuccess with the raw completion, or TranslationFailure.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier used for completions."""
        ...
