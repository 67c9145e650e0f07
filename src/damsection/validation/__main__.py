#!/usr/bin/env python3
"""
Validation of an extracted dam section.

Runs the geometry, engineering and boundary condition passes on a section
profile JSON and writes a JSON artifact. The exit code is 0 when the
section is validated or ready for calculation, 2 when it needs attention.
"""

import argparse
import json
import logging
import os
import sys

from ..errors import InputError
from ..profile.features import identify_geometric_features
from ..profile.serialization import profile_from_dict
from .engine import validate_profile


def main():
    parser = argparse.ArgumentParser(description='Validate an extracted dam section')
    parser.add_argument('--profile', required=True, help='Path to section profile JSON file')
    parser.add_argument('--output', required=True, help='Path to output validation JSON file')
    parser.add_argument('--identify-features', action='store_true',
                        help='Locate heel, toe, crest and slope changes before validating')
    parser.add_argument('--quiet', action='store_true', help='Suppress human-readable output')
    parser.add_argument('--verbose', action='store_true', help='Log validation progress')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if not os.path.exists(args.profile):
        print(f"ERROR: Profile file not found: {args.profile}", file=sys.stderr)
        sys.exit(1)

    try:
        with open(args.profile, 'r') as f:
            profile = profile_from_dict(json.load(f))
    except (InputError, KeyError, json.JSONDecodeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if args.identify_features:
        identify_geometric_features(profile)

    result = validate_profile(profile)

    # Write output
    os.makedirs(os.path.dirname(args.output) or '.', exist_ok=True)
    with open(args.output, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)

    # Print report
    if not args.quiet:
        print(result.generate_report())

    if result.passed:
        print(f"✓ Validation complete ({result.overall_status.value}): {args.output}")
        sys.exit(0)
    else:
        print(f"✗ Section needs attention ({result.overall_status.value}): {args.output}")
        sys.exit(2)


if __name__ == "__main__":
    main()
