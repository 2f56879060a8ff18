"""Assist collaborator interface for the HTML PDF Studio."""

from abc import ABC, abstractmethod

from ..models.conversation import AssistRequest, AssistResponse


class IAssistant(ABC):
    """
    Abstract interface for the code assist collaborator.

    Implementations send the user's message, the current document and the
    conversation so far to a language model and return its reply together
    with a suggested document.
    """

    @abstractmethod
    async def assist(self, request: AssistRequest) -> AssistResponse:
        """
        Ask the language model for a document suggestion.

        Args:
            request: Message, current document, history and endpoint settings.

        Returns:
            AssistResponse with the reply and the suggested document.

        Raises:
            AssistError: If the endpoint cannot be reached, the model is
                missing or the reply cannot be read.
        """
        pass
