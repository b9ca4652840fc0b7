"""
Response parsing for structured LLM calls.

Handles extraction of JSON from various formats (raw JSON, markdown code
blocks, etc.) and validation against the pydantic contracts.
"""

import json
import logging
import re
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ParseError(Exception):
    """Raised when response parsing fails."""

    pass


def extract_json_from_response(raw_response: str) -> str:
    """
    Extract JSON content from LLM response.

    Handles multiple formats:
    - Raw JSON
    - JSON in markdown code blocks (```json ... ```)
    - JSON with leading/trailing whitespace or prose around it

    Args:
        raw_response: Raw LLM response string

    Returns:
        Cleaned JSON string ready for parsing

    Raises:
        ParseError: If no valid JSON structure is found
    """
    content = (raw_response or "").strip()

    # Try to extract from markdown code block
    match = re.search(r"```(?:json)?\s*([\s\S]*?)```", content)
    if match:
        content = match.group(1).strip()

    start = content.find("{")
    if start == -1:
        raise ParseError(f"No JSON object found in response: {content[:200]}")

    # Find matching closing brace, ignoring braces inside strings
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(content)):
        char = content[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[start : i + 1]

    raise ParseError(f"Unbalanced JSON object in response: {content[:200]}")


def parse_structured_response(raw_response: str, model: Type[ModelT]) -> ModelT:
    """
    Parse an LLM response into a contract model.

    Args:
        raw_response: Raw LLM response string
        model: Pydantic model to validate against

    Returns:
        Validated model instance

    Raises:
        ParseError: If the JSON is malformed or fails validation
    """
    json_str = extract_json_from_response(raw_response)
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Validation failed for {model.__name__}: {data}")
        raise ParseError(f"Response does not match {model.__name__}: {e}") from e
