"""
estate_match/errors.py

Error taxonomy shared by the analysis pipeline and the listing chat.

  EstateMatchError
    ├── InputError            (bad listing text, blank chat message, bad preferences)
    ├── ConfigurationError    (missing API key, out-of-range temperature)
    └── AnalysisError         (anything that goes wrong once the engine is involved)
          ├── EngineError           (transport / quota / server failure, or no output)
          ├── ParseError            (engine output is not JSON)
          └── SchemaViolationError  (JSON that does not match the result schema)

Input and configuration errors are raised before any engine call.
"""

# Message the caller can show verbatim when an analysis fails
ANALYSIS_FAILED_MESSAGE = (
    "Failed to analyze listing. The AI model might be busy or the content was "
    "too ambiguous. Try pasting just the description and key facts."
)


class EstateMatchError(Exception):
    """Base class for every error raised by estate_match."""


class InputError(EstateMatchError, ValueError):
    """Caller supplied unusable input (empty listing text, invalid preferences)."""


class ConfigurationError(EstateMatchError, ValueError):
    """Required configuration is missing or invalid."""


class AnalysisError(EstateMatchError):
    """An analysis request failed after it was handed to the engine."""

    user_message = ANALYSIS_FAILED_MESSAGE


class EngineError(AnalysisError, RuntimeError):
    """The external engine call failed or returned no text."""


class ParseError(AnalysisError, ValueError):
    """Engine output could not be parsed as JSON."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class SchemaViolationError(AnalysisError, ValueError):
    """Engine output parsed as JSON but does not match the result schema."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path
