"""Exchange error payload."""

from pydantic import BaseModel, ConfigDict


class ErrorPayload(BaseModel):
    """Body of a non-200 Binance response: ``{"code": -1100, "msg": "..."}``."""

    code: int
    msg: str

    model_config = ConfigDict(frozen=True)
