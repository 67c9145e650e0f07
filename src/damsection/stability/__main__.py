#!/usr/bin/env python3
"""
Stability analysis of a dam section.

Reads a section profile JSON (and optionally an analysis parameter JSON),
computes loads and safety factors and writes a JSON artifact. Water levels
missing from the parameter file are taken from the profile.
"""

import argparse
import json
import logging
import os
import sys

from ..errors import InputError
from ..profile.models import MaterialProperties
from ..profile.serialization import profile_from_dict
from .analyze import analyze_profile
from .parameters import parameters_from_dict


def load_parameter_data(path, profile):
    """Parameter dict from the JSON file, completed with the profile's water levels."""
    data = {}
    if path:
        with open(path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise InputError(f"Parameter file must hold a JSON object: {path}")
    if profile.water_levels.upstream > 0:
        data.setdefault('upstream_water_level', profile.water_levels.upstream)
        data.setdefault('downstream_water_level', max(profile.water_levels.downstream, 0.0))
    return data


def main():
    parser = argparse.ArgumentParser(description='Analyze sliding and overturning stability of a dam section')
    parser.add_argument('--profile', required=True, help='Path to section profile JSON file')
    parser.add_argument('--parameters', help='Path to analysis parameter JSON file')
    parser.add_argument('--output', required=True, help='Path to output JSON artifact')
    parser.add_argument('--output-png', help='Path to output section diagram (PNG)')
    parser.add_argument('--material-grade',
                        help='Concrete grade for the unit weight (default: largest material zone)')
    parser.add_argument('--upstream-level', type=float, help='Upstream water depth in m')
    parser.add_argument('--downstream-level', type=float, help='Downstream water depth in m')
    parser.add_argument('--seismic-coefficient', type=float, help='Horizontal seismic coefficient')
    parser.add_argument('--quiet', action='store_true', help='Suppress human-readable output')
    parser.add_argument('--verbose', action='store_true', help='Log analysis progress')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    for path in (args.profile, args.parameters):
        if path and not os.path.exists(path):
            print(f"ERROR: File not found: {path}", file=sys.stderr)
            sys.exit(1)

    try:
        with open(args.profile, 'r') as f:
            profile = profile_from_dict(json.load(f))

        data = load_parameter_data(args.parameters, profile)
        if args.upstream_level is not None:
            data['upstream_water_level'] = args.upstream_level
        if args.downstream_level is not None:
            data['downstream_water_level'] = args.downstream_level
        if args.seismic_coefficient is not None:
            data['seismic_coefficient'] = args.seismic_coefficient
        params = parameters_from_dict(data)

        material = None
        if args.material_grade:
            material = MaterialProperties.standard_concrete(args.material_grade)

        if not args.quiet:
            print(f"Analyzing section stability: {profile.name or args.profile}")
        result = analyze_profile(profile, params, material)
    except (InputError, KeyError, json.JSONDecodeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    # Write JSON output
    os.makedirs(os.path.dirname(args.output) or '.', exist_ok=True)
    with open(args.output, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)

    if args.output_png:
        from .diagrams import plot_section_diagram
        plot_section_diagram(profile, result, args.output_png)

    if not args.quiet:
        print()
        print(result.generate_report())
        print(f"  Output: {args.output}")
        if args.output_png:
            print(f"  Diagram: {args.output_png}")

    if result.overall_stable:
        print(f"✓ Stability analysis PASSED: {args.output}")
        sys.exit(0)
    else:
        print(f"✗ Stability analysis FAILED: {args.output}")
        sys.exit(2)


if __name__ == "__main__":
    main()
