"""
Error taxonomy shared by every stage.

    InsufficientInput   caller data fails a precondition (no model call made)
    SchemaViolation     model output does not match the declared schema
    ProviderError       transport / quota / model-side failure
    AnalysisFailed      style extraction could not complete
"""

from __future__ import annotations

from typing import List


class ScriptMimicError(Exception):
    """Base class for everything raised on purpose by scriptmimic."""


class InsufficientInput(ScriptMimicError):
    pass


class DuplicateProfileName(InsufficientInput):
    pass


class SchemaViolation(ScriptMimicError):
    def __init__(self, message: str, raw: str = "", path: List | None = None):
        super().__init__(message)
        self.raw = raw
        self.path = list(path or [])


class ProviderError(ScriptMimicError):
    pass


class AnalysisFailed(ScriptMimicError):
    pass
