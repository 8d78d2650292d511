"""Decoding of FileHeap HTTP responses into models and errors."""

import json
from typing import Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from common.models import ErrorBody
from fileheap.errors import APIError, FileNotFound, ResponseDecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def error_from_response(response: httpx.Response) -> None:
    """
    Raise the error carried by an HTTP response. Statuses below 400 are not
    errors and pass silently.

    Raises:
        APIError: Decoded error envelope
        ResponseDecodeError: If the body can't be read or isn't an error envelope
    """
    if response.status_code < 400:
        return

    try:
        body = response.read()
    except httpx.HTTPError as e:
        raise ResponseDecodeError(response.status_code, f"failed to read response: {e}") from e

    if not body.strip():
        message = response.reason_phrase or f"HTTP {response.status_code}"
        raise APIError(code=response.status_code, message=message.lower())

    try:
        envelope = ErrorBody.model_validate_json(body)
    except ValidationError as e:
        raise ResponseDecodeError(response.status_code, f"failed to parse response: {e}") from e

    raise APIError(code=envelope.code, message=envelope.message, detail=envelope.detail)


def raise_for_file(response: httpx.Response) -> None:
    """Like error_from_response, but a 404 raises the FileNotFound sentinel."""
    if response.status_code == httpx.codes.NOT_FOUND:
        raise FileNotFound()
    error_from_response(response)


def parse_response(response: httpx.Response, model: Type[ModelT]) -> ModelT:
    """
    Decode a successful response body into the given model.

    Raises:
        APIError: If the response is an error
        ResponseDecodeError: If the body doesn't match the model
    """
    error_from_response(response)
    try:
        return model.model_validate_json(response.read())
    except (ValidationError, json.JSONDecodeError) as e:
        raise ResponseDecodeError(response.status_code, f"failed to parse response: {e}") from e
