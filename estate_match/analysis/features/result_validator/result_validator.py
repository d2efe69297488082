"""
estate_match/analysis/features/result_validator/result_validator.py

Turns the engine's raw text into a typed AnalysisResult, or a classified error:

  - not JSON at all                       -> ParseError
  - JSON of the wrong shape or types      -> SchemaViolationError
  - otherwise                             -> AnalysisResult, untouched

Enum membership is deliberately not enforced here; unknown grades, verdicts
and confidence levels become UNCLASSIFIED in the typed model.

`find_quality_issues` runs the softer checks (score range, grade consistency,
quotes that are not in the listing) and reports rather than raises.
"""

import json
import logging
from json import JSONDecodeError
from typing import Any, Dict, List

from jsonschema import Draft7Validator, validate, ValidationError
from pydantic import ValidationError as ModelValidationError

from estate_match.errors import ParseError, SchemaViolationError
from .models import AnalysisResult, Confidence, Grade, ValueVerdict, grade_for_score

logger = logging.getLogger(__name__)


def structural_schema(schema: Any) -> Any:
    """Copy of `schema` with every `enum` constraint removed (types and required keys stay)."""
    if isinstance(schema, dict):
        return {k: structural_schema(v) for k, v in schema.items() if k != "enum"}
    if isinstance(schema, list):
        return [structural_schema(v) for v in schema]
    return schema


def parse_analysis_result(raw: str, schema: Dict[str, Any]) -> AnalysisResult:
    """
    Parse and validate one engine response.

    Args:
        raw:    Raw engine output, expected to be a JSON object.
        schema: The AnalysisResult JSON Schema the engine was given.

    Raises:
        ParseError:           If `raw` is not valid JSON.
        SchemaViolationError: If the JSON does not have the AnalysisResult shape.
    """
    try:
        data = json.loads(raw)
    except (JSONDecodeError, TypeError) as e:
        logger.error("Engine returned invalid JSON: %s", e)
        raise ParseError(f"Engine returned invalid JSON: {e}", raw=str(raw)) from e

    if not isinstance(data, dict):
        raise SchemaViolationError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    try:
        validate(instance=data, schema=structural_schema(schema), cls=Draft7Validator)
    except ValidationError as ve:
        path = "/".join(str(p) for p in ve.absolute_path)
        logger.error("Engine output failed schema validation at '%s': %s", path, ve.message)
        raise SchemaViolationError(
            f"Output validation error at '{path}': {ve.message}", path=path
        ) from ve

    try:
        return AnalysisResult.model_validate(data)
    except ModelValidationError as e:
        raise SchemaViolationError(f"Output validation error: {e}") from e


def find_quality_issues(result: AnalysisResult, listing_text: str) -> List[str]:
    """
    Data-quality defects that do not invalidate the result.

    Returns:
        Human-readable issue strings; empty when the result looks clean.
    """
    issues: List[str] = []
    score = result.match_score

    if not 0 <= score.total <= 100:
        issues.append(f"Match score total {score.total} is outside 0-100")

    for name, value in score.category_scores.model_dump().items():
        if not 0 <= value <= 100:
            issues.append(f"Category score '{name}' = {value} is outside 0-100")

    if score.grade is Grade.UNCLASSIFIED:
        issues.append("Grade is not on the published scale")
    else:
        expected = grade_for_score(max(0, min(100, score.total)))
        if score.grade is not expected:
            issues.append(
                f"Grade {score.grade.value} does not match total {score.total} "
                f"(expected {expected.value})"
            )

    if result.market_analysis.value_verdict is ValueVerdict.UNCLASSIFIED:
        issues.append("Value verdict is not one of the known verdicts")

    sections = [
        ("pros", result.details.pros),
        ("cons", result.details.cons),
        ("redFlags", result.details.red_flags),
    ]
    for section, claims in sections:
        for idx, claim in enumerate(claims):
            if claim.confidence is Confidence.UNCLASSIFIED:
                issues.append(f"{section}[{idx}] has an unclassified confidence level")
            if claim.source_quote is not None and claim.source_quote not in listing_text:
                issues.append(
                    f"{section}[{idx}] quote is not in the listing text: {claim.source_quote!r}"
                )

    return issues
