"""
Plain-text reports for analysis and validation results.

Layout follows the console reports of the command-line tools: a title,
dashed separators and fixed-precision figures with PASS/FAIL markers.
"""

from .stability.safety import format_safety_factor


def _mark(passed: bool) -> str:
    return "PASS" if passed else "FAIL"


def format_analysis_report(result) -> str:
    """Report text for an AnalysisResult."""
    g = result.geometry
    loads = result.loads
    s = result.stability

    lines = [
        "Section Stability Analysis Report",
        "=" * 60,
        f"Section: {result.profile_name or result.profile_id}",
        f"Analyzed: {result.analyzed_at:%Y-%m-%d %H:%M:%S}",
        f"Material: {result.material.name} ({result.material.density:.1f} kN/m³)",
        "",
        "Geometry:",
        f"  Area: {g.area:.2f} m²",
        f"  Centroid: ({g.centroid.x:.2f}, {g.centroid.y:.2f}) m",
        f"  Height: {g.height:.2f} m",
        f"  Width: {g.width:.2f} m",
        f"  Base width: {g.base_width:.2f} m",
        f"  Top width: {g.top_width:.2f} m",
        f"  Ixx / Iyy / Ixy: {g.moment_of_inertia_x:.1f} / {g.moment_of_inertia_y:.1f} / "
        f"{g.product_of_inertia:.1f} m⁴",
        "",
        "Loads (per metre):",
        f"  Self-weight: {loads.self_weight:.1f} kN/m",
        f"  Net water pressure: {loads.net_water_pressure:.1f} kN/m",
        f"  Uplift: {loads.uplift_force:.1f} kN/m",
        f"  Seismic: {loads.seismic_force:.1f} kN/m",
        f"  Effective normal force: {loads.effective_normal_force:.1f} kN/m",
        "",
        "Stability:",
        f"  Sliding SF: {format_safety_factor(s.sliding_safety_factor)} "
        f"(required {s.required_sliding_safety_factor:.2f}) {_mark(s.sliding_stable)}",
        f"  Overturning SF: {format_safety_factor(s.overturning_safety_factor)} "
        f"(required {s.required_overturning_safety_factor:.2f}) {_mark(s.overturning_stable)}",
        f"  Overall: {_mark(s.overall_stable)}",
    ]

    if result.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  - {w}" for w in result.warnings)

    return "\n".join(lines) + "\n"


def _format_issue(issue) -> str:
    text = f"  [{issue.severity.value.upper()}] {issue.description}"
    if issue.location is not None:
        text += f" at {issue.location}"
    if issue.suggested_fix:
        text += f"\n      fix: {issue.suggested_fix}"
        if issue.auto_fixable:
            text += " (auto-fixable)"
    return text


def format_validation_report(result) -> str:
    """Report text for a ProfileValidationResult."""
    lines = [
        "Section Validation Report",
        "=" * 60,
        f"Validated: {result.validated_at:%Y-%m-%d %H:%M:%S}",
        f"Status: {result.overall_status.value}",
        f"Overall score: {result.overall_score:.3f}",
    ]

    passes = (
        ("Geometry", result.geometry),
        ("Engineering", result.engineering),
        ("Boundary conditions", result.boundary_conditions),
    )
    for title, sub in passes:
        lines.append("")
        lines.append("-" * 60)
        lines.append(f"{title}: score {sub.score:.3f} {_mark(sub.passed_validation)}")
        lines.append("-" * 60)
        if not sub.issues:
            lines.append("  No issues")
        lines.extend(_format_issue(i) for i in sub.issues)

    missing = result.boundary_conditions.missing_conditions
    if missing:
        lines.append("")
        lines.append("Missing conditions: " + ", ".join(missing))

    return "\n".join(lines) + "\n"
