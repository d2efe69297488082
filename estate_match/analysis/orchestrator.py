#!/usr/bin/env python3
"""
estate_match/analysis/orchestrator.py

Pipeline runner for listing analysis:
  1. Reject empty listing text before anything else happens.
  2. Build the instruction profile, schema function and user prompt.
  3. Call the engine once (no retries).
  4. Parse and validate the output into an AnalysisResult.
  5. Log any data-quality issues and return the result.

Run standalone to analyze a listing file against a preferences JSON file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from estate_match.analysis.features.contract_builder.contract_builder import build_contract
from estate_match.analysis.features.preferences.preferences import PreferenceProfile
from estate_match.analysis.features.result_validator.models import AnalysisResult
from estate_match.analysis.features.result_validator.result_validator import (
    find_quality_issues,
    parse_analysis_result,
)
from estate_match.engine.engine_client import EngineClient
from estate_match.errors import EstateMatchError, InputError

logger = logging.getLogger(__name__)


def analyze(
    listing_text: str,
    preferences: PreferenceProfile,
    engine: EngineClient,
) -> AnalysisResult:
    """
    Evaluate one listing against one preference profile.

    Raises:
        InputError:           Listing text is empty or whitespace.
        EngineError:          The engine call failed or returned nothing.
        ParseError:           The engine output is not JSON.
        SchemaViolationError: The engine output does not match the result schema.
    """
    if not listing_text or not listing_text.strip():
        raise InputError("Please paste some listing text or HTML content.")

    contract = build_contract(listing_text, preferences)
    raw = engine.generate_structured(
        contract.instructions,
        contract.prompt,
        contract.function_def,
    )
    result = parse_analysis_result(raw, contract.function_def["parameters"])

    for issue in find_quality_issues(result, listing_text):
        logger.warning("Data-quality issue: %s", issue)

    logger.info(
        "Analysis complete: %s scored %s (%s)",
        result.summary.title, result.match_score.total, result.match_score.grade.value,
    )
    return result


def load_preferences(path: Path) -> PreferenceProfile:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Failed to load preferences '{path}': {e}") from e
    return PreferenceProfile.from_dict(data)


def run_analysis(
    listing_path: Path,
    preferences_path: Path,
    output_path: Path,
    engine: EngineClient,
) -> AnalysisResult:
    # 1. Load listing text
    try:
        listing_text = listing_path.read_text(encoding="utf-8")
    except OSError as e:
        sys.exit(f"❌ Failed to load listing '{listing_path}': {e}")

    # 2. Load preferences
    try:
        preferences = load_preferences(preferences_path)
    except InputError as e:
        sys.exit(f"❌ {e}")

    print(f"✅ Loaded {len(listing_text)} characters of listing text ({preferences.mode.value} mode)")

    # 3. Analyze
    print("🔍 Analyzing listing…")
    try:
        result = analyze(listing_text, preferences, engine)
    except InputError as e:
        sys.exit(f"❌ {e}")
    except EstateMatchError as e:
        logger.error("Analysis failed: %s", e)
        sys.exit(f"❌ {getattr(e, 'user_message', str(e))}")

    # 4. Persist output
    try:
        output_path.write_text(result.to_json(), encoding="utf-8")
    except OSError as e:
        sys.exit(f"❌ Failed to write analysis to '{output_path}': {e}")

    print(
        f"🏷️  {result.summary.title}: {result.match_score.total}/100 "
        f"({result.match_score.grade.value})"
    )
    print(f"💾 Wrote analysis to {output_path}")
    return result


def main():
    parser = argparse.ArgumentParser(description="Listing Analysis Orchestrator")
    parser.add_argument(
        "--listing", type=Path, required=True,
        help="Path to a text file holding the pasted listing"
    )
    parser.add_argument(
        "--preferences", type=Path, default=Path("preferences.json"),
        help="Path to the preference profile JSON"
    )
    parser.add_argument(
        "--out", type=Path, default=Path("analysis.json"),
        help="Path where the analysis result will be written"
    )
    parser.add_argument(
        "--model", type=str, default=None,
        help="OpenAI model name (default: ESTATE_MATCH_MODEL or gpt-4o)"
    )
    parser.add_argument(
        "--temperature", type=float, default=None,
        help="Sampling temperature, 0.0–0.2"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        engine = EngineClient(model=args.model, temperature=args.temperature)
    except EstateMatchError as e:
        sys.exit(f"❌ {e}")

    run_analysis(
        listing_path=args.listing,
        preferences_path=args.preferences,
        output_path=args.out,
        engine=engine,
    )


if __name__ == "__main__":
    main()
