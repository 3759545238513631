"""Authentication challenge value object."""

from pydantic import BaseModel, ConfigDict, Field

MTAN_TITLE = "mTAN Eingabe"
MTAN_LABEL = "mTAN-Code"


class AuthChallenge(BaseModel):
    """Prompt shown to the user when the bank needs more input.

    Produced by the login flow and consumed by whatever UI collects the
    SMS code. Never persisted.
    """

    title: str = Field(..., min_length=1)
    challenge_text: str = Field(..., min_length=1, description="Instruction text")
    label: str = Field(..., min_length=1, description="Input field label")
    recipient: str = Field(default="", description="Masked phone number")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_mtan(cls, recipient: str) -> "AuthChallenge":
        return cls(
            title=MTAN_TITLE,
            challenge_text=(
                "Bitte geben Sie den mTAN-Code ein, der an "
                f"{recipient} gesendet wurde."
            ),
            label=MTAN_LABEL,
            recipient=recipient,
        )

    def __str__(self) -> str:
        return f"{self.title}\n{self.challenge_text}"
