from abc import ABC, abstractmethod


class IEmailSender(ABC):
    @abstractmethod
    async def send_email(self, *, to: str, subject: str, html: str, text: str) -> None:
        """
        Raises:
            Exception: transport failure (the dispatcher catches and logs it)
        """
        pass
