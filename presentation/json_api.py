"""
JSON API serialization.

AnalysisResult is already a pydantic model; these helpers fix the wire
format (camelCase keys, enum values, ISO datetimes) for web consumers.
"""

from typing import Any

from domain import AnalysisResult


def to_api_response(result: AnalysisResult, include_history: bool = True) -> dict[str, Any]:
    """
    JSON-compatible dict with camelCase keys.

    Args:
        include_history: Drop the bar series when False to keep payloads small
    """
    exclude = None if include_history else {"history"}
    return result.model_dump(mode="json", by_alias=True, exclude=exclude)


def to_json(result: AnalysisResult, indent: int | None = 2, include_history: bool = True) -> str:
    """Serialize an AnalysisResult with camelCase keys."""
    exclude = None if include_history else {"history"}
    return result.model_dump_json(by_alias=True, indent=indent, exclude=exclude)


def from_json(payload: str | bytes) -> AnalysisResult:
    """Parse a payload produced by `to_json`."""
    return AnalysisResult.model_validate_json(payload)
