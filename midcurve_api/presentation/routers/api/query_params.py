"""Query-string parsing into pydantic models.

FastAPI validates individual Query() parameters, but the list endpoints
need model-level rules (at-least-one-of, comma-separated lists) and treat
an empty value (``?symbol=``) as absent. ``query_model(Model)`` builds a
dependency that validates the whole query string against a model and
raises RequestValidationError with ``query``-prefixed locations, so the
global handler renders it like any other validation failure.

Usage:
    async def search(
        query: Annotated[SearchErc20TokensQuery, Depends(query_model(SearchErc20TokensQuery))],
    ): ...
"""

from collections.abc import Callable
from typing import TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def query_model(model: type[ModelT]) -> Callable[[Request], ModelT]:
    """Build a dependency validating the query string against `model`.

    Args:
        model: Pydantic model with camelCase aliases for query names.

    Returns:
        FastAPI dependency returning a validated `model` instance.
    """

    def dependency(request: Request) -> ModelT:
        raw = {key: value for key, value in request.query_params.items() if value != ""}
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            errors = [
                {**error, "loc": ("query", *error["loc"])}
                for error in exc.errors(include_url=False)
            ]
            raise RequestValidationError(errors) from exc

    dependency.__name__ = f"parse_{model.__name__}"
    return dependency
