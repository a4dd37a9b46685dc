"""
Schemas for the document lookup endpoint.

A document record is returned verbatim with every column the row has, so the
success body is a plain mapping rather than a fixed model.
"""

from typing import Any

DocumentRecord = dict[str, Any]
