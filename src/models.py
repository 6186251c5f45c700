"""LogMessage value type and the display-line format shared by the endpoint and the log file."""

from dataclasses import dataclass

from src.form import first_value


class MissingField(Exception):
    """Raised when a required request field is empty or absent."""

    def __init__(self, field: str):
        super().__init__(f"{field} missing")
        self.field = field


@dataclass(frozen=True)
class LogMessage:
    client_id: str
    body: str

    def formatted(self) -> str:
        return f"client {self.client_id}: {self.body}"

    @classmethod
    def from_form(cls, form: dict[str, list[str]]) -> "LogMessage":
        """Build a message from parsed form values. ``id`` is checked before ``msg``."""
        client_id = first_value(form, "id")
        if not client_id:
            raise MissingField("id")
        body = first_value(form, "msg")
        if not body:
            raise MissingField("msg")
        return cls(client_id=client_id, body=body)
