from .report import (
    generate_markdown_report,
    summarize,
    write_report,
)
from .json_api import (
    from_json,
    to_api_response,
    to_json,
)

__all__ = [
    # Report generation
    "summarize",
    "generate_markdown_report",
    "write_report",
    # JSON API
    "to_api_response",
    "to_json",
    "from_json",
]
