"""Typed decoding layered over the raw-frame stream handler."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import DecodeError, ValidationError
from ..runtime.ws.session import StreamHandler

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

TypedHandler = Callable[[M], Awaitable[None] | None]
ErrorHandler = Callable[[DecodeError], Awaitable[None] | None]


def normalize_symbol(symbol: str) -> str:
    """Lowercase and strip a symbol for use in a stream name."""
    if not symbol or not symbol.strip():
        raise ValidationError("Symbol must not be empty")
    return symbol.strip().lower()


class MessageAdapter(Generic[M]):
    """Decode raw frames of one stream kind into a pydantic model."""

    model: type[M]

    def __init__(self, model: type[M]) -> None:
        self.model = model

    def parse(self, frame: str | bytes) -> M:
        """Validate one frame.

        Raises:
            DecodeError: Malformed JSON or wrong shape
        """
        try:
            return self.model.model_validate_json(frame)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Could not decode {self.model.__name__}: {e.error_count()} error(s)", body=frame
            ) from e

    def wrap(self, handler: TypedHandler, on_error: ErrorHandler | None = None) -> StreamHandler:
        """Turn a typed handler into a raw-frame handler.

        Frames that fail to decode are logged and dropped unless on_error is
        given, in which case it receives the DecodeError.
        """

        async def _handle(frame: str | bytes) -> None:
            try:
                event = self.parse(frame)
            except DecodeError as e:
                if on_error is None:
                    logger.warning(f"Dropping undecodable {self.model.__name__} frame: {e}")
                    return
                result = on_error(e)
            else:
                result = handler(event)
            if inspect.isawaitable(result):
                await result

        return _handle
