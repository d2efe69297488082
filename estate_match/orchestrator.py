#!/usr/bin/env python3
"""
estate_match/orchestrator.py

End-to-end listing evaluation:
  1. Analyze the pasted listing against the preference profile (writes analysis.json)
  2. Optionally open a follow-up chat scoped to the same listing

One EngineClient is built here and shared by both phases.
"""

import argparse
import logging
import sys
from pathlib import Path

from .analysis.orchestrator import run_analysis
from .engine.engine_client import EngineClient
from .errors import EstateMatchError
from .listing_chat.features.chat_session.chat_session import create_chat
from .listing_chat.main import chat_loop


def main():
    parser = argparse.ArgumentParser(
        description="Evaluate a pasted real-estate listing against your preferences."
    )
    parser.add_argument(
        "--listing", type=Path, required=True,
        help="Path to a text file holding the pasted listing."
    )
    parser.add_argument(
        "--preferences", type=Path, default=Path("preferences.json"),
        help="Path to the preference profile JSON."
    )
    parser.add_argument(
        "--out", type=Path, default=Path("analysis.json"),
        help="Path to write the analysis result."
    )
    parser.add_argument(
        "--chat", action="store_true",
        help="Open a follow-up chat about the listing after the analysis."
    )
    parser.add_argument(
        "--model", type=str, default=None,
        help="OpenAI model for engine calls."
    )
    parser.add_argument(
        "--temperature", type=float, default=None,
        help="Sampling temperature for the analysis (0.0–0.2)."
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

    # 1. Analysis
    print("📝  Phase 1: Analyzing listing…")
    run_analysis(
        listing_path=args.listing,
        preferences_path=args.preferences,
        output_path=args.out,
        engine=engine,
    )

    # 2. Follow-up chat
    if args.chat:
        print("\n💬  Phase 2: Ask about this listing (type 'exit' to finish)…")
        listing_text = args.listing.read_text(encoding="utf-8")
        chat_loop(create_chat(engine, listing_text))

    print(f"\n🎉  Done! Analysis written to {args.out}")


if __name__ == "__main__":
    main()
