import asyncio
import json
import logging
import sys

from locator.config.env import get_log_level
from locator.resolver.core import Ambiguous, LocationValidation, Resolved, resolve_location
from locator.resolver.formatter import best_match, to_candidate


def main():
    args = [a for a in sys.argv[1:] if a != "--best"]
    if not args:
        print("Usage: python -m locator.resolver.cli <place name> [--best]")
        sys.exit(2)
    logging.basicConfig(level=get_log_level(), stream=sys.stderr)
    name = " ".join(args)
    outcome = asyncio.run(resolve_location(name))
    out = LocationValidation.from_outcome(outcome).to_dict()
    if isinstance(outcome, Resolved):
        out["choice"] = outcome.place.to_dict()
    elif isinstance(outcome, Ambiguous):
        out["choices"] = [c.to_dict() for c in outcome.candidates]
    if "--best" in sys.argv[1:]:
        pick = best_match(outcome.results)
        out["best_match"] = to_candidate(pick).to_dict() if pick else None
    print(json.dumps(out, indent=2))
    if not outcome.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
