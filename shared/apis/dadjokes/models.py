from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import APIRequestError, FetchErrorKind


__all__ = ("Dadjoke", "FetchError")


class Dadjoke(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True)

    id: str
    text: str = Field(alias="joke", min_length=1)
    status_code: int = Field(alias="status")


@dataclass(frozen=True)
class FetchError:
    """A failed fetch, reduced to what the screen shows to the user"""

    kind: FetchErrorKind
    message: str

    @classmethod
    def from_exception(cls, error: APIRequestError) -> "FetchError":
        return cls(error.kind, error.message)
