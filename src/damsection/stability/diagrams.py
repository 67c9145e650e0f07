"""
Generate a load diagram of an analyzed dam section.

Uses Matplotlib to draw the section outline, holes, water levels and the
resultant loads of a stability analysis.
"""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon

from .safety import format_safety_factor


# Style constants
SECTION_COLOR = 'lightgray'
HOLE_COLOR = 'white'
WATER_COLOR = '#93c5fd'
FORCE_COLOR = 'red'
UPLIFT_COLOR = 'purple'
WEIGHT_COLOR = 'green'
TITLE_SIZE = 14
SMALL_LABEL_SIZE = 10


def setup_diagram(figsize=(10, 7)):
    """Create a figure with clean styling for technical diagrams."""
    fig, ax = plt.subplots(figsize=figsize)
    ax.set_aspect('equal')
    ax.axis('off')
    return fig, ax


def draw_force_arrow(ax, x, y, dx=0, dy=0, label=None, color=FORCE_COLOR, label_offset=(0, 0)):
    """Draw a force arrow from (x, y) along (dx, dy)."""
    ax.annotate('', xy=(x + dx, y + dy), xytext=(x, y),
                arrowprops=dict(arrowstyle='->', color=color, lw=2))
    if label:
        ax.text(x + dx / 2 + label_offset[0], y + dy / 2 + label_offset[1], label,
                fontsize=SMALL_LABEL_SIZE, color=color, ha='center', va='center')


def draw_water(ax, x_face, base_y, level, extent, upstream=True):
    """Shaded water body against one face of the section."""
    if level <= 0:
        return
    x0 = x_face - extent if upstream else x_face
    ax.add_patch(Polygon([(x0, base_y), (x0 + extent, base_y),
                          (x0 + extent, base_y + level), (x0, base_y + level)],
                         closed=True, facecolor=WATER_COLOR, edgecolor='none', alpha=0.5))
    ax.plot([x0, x0 + extent], [base_y + level] * 2, color='#2563eb', lw=1.5)
    ax.text(x0 + extent / 2, base_y + level, f'WL {level:.1f} m', fontsize=SMALL_LABEL_SIZE,
            ha='center', va='bottom', color='#2563eb')


def save_diagram(fig, output_path):
    """Save diagram with consistent settings."""
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight',
                facecolor='white', edgecolor='none')
    plt.close(fig)


def plot_section_diagram(profile, result, output_path):
    """
    Draw the section with its loads and save it as PNG.

    Args:
        profile: Analyzed Profile
        result: AnalysisResult of the profile
        output_path: Path for output PNG file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    g = result.geometry
    loads = result.loads
    params = result.parameters
    bbox = profile.geometry.bounding_box
    size = max(g.width, g.height, 1.0)
    arrow = 0.2 * size
    base_y = g.base_level

    fig, ax = setup_diagram()

    # Water
    draw_water(ax, bbox.min_x, base_y, params.upstream_water_level, 0.4 * size, upstream=True)
    draw_water(ax, bbox.max_x, base_y, params.downstream_water_level, 0.4 * size, upstream=False)

    # Section and holes
    ax.add_patch(Polygon([p.as_tuple() for p in profile.main_contour], closed=True,
                         facecolor=SECTION_COLOR, edgecolor='black', lw=1.5))
    for hole in profile.inner_contours:
        ax.add_patch(Polygon([p.as_tuple() for p in hole], closed=True,
                             facecolor=HOLE_COLOR, edgecolor='black', lw=1.0))

    # Foundation line
    ax.plot([bbox.min_x - 0.5 * size, bbox.max_x + 0.5 * size], [base_y, base_y],
            color='black', lw=1.0)

    # Centroid and toe
    cx, cy = g.centroid.x, g.centroid.y
    ax.plot(cx, cy, 'k+', markersize=12, mew=2)
    ax.text(cx, cy, '  G', fontsize=SMALL_LABEL_SIZE, ha='left', va='bottom')
    ax.plot(g.toe.x, g.toe.y, 'o', color=FORCE_COLOR, markersize=6)
    ax.text(g.toe.x, g.toe.y - 0.05 * size, 'toe', fontsize=SMALL_LABEL_SIZE,
            ha='center', va='top', color=FORCE_COLOR)

    # Loads
    draw_force_arrow(ax, cx, cy, dy=-arrow, label=f'W = {loads.self_weight:.0f}',
                     color=WEIGHT_COLOR, label_offset=(0.12 * size, 0))
    if loads.net_water_pressure > 0:
        y_p = base_y + g.height / 3.0
        draw_force_arrow(ax, bbox.min_x - arrow, y_p, dx=arrow,
                         label=f'P = {loads.net_water_pressure:.0f}',
                         label_offset=(0, 0.05 * size))
    if loads.uplift_force > 0:
        x_u = bbox.min_x + g.base_width / 2.0
        draw_force_arrow(ax, x_u, base_y - arrow, dy=arrow,
                         label=f'U = {loads.uplift_force:.0f}', color=UPLIFT_COLOR,
                         label_offset=(0.12 * size, 0))
    if loads.seismic_force > 0:
        draw_force_arrow(ax, cx, cy, dx=arrow, label=f'Fs = {loads.seismic_force:.0f}',
                         label_offset=(0, 0.05 * size))

    s = result.stability
    stats_text = (
        f"Sliding SF: {format_safety_factor(s.sliding_safety_factor, 2)} "
        f"(req. {s.required_sliding_safety_factor:.2f})\n"
        f"Overturning SF: {format_safety_factor(s.overturning_safety_factor, 2)} "
        f"(req. {s.required_overturning_safety_factor:.2f})\n"
        f"Result: {'PASS' if s.overall_stable else 'FAIL'}"
    )
    ax.text(0.02, 0.98, stats_text, transform=ax.transAxes, fontsize=SMALL_LABEL_SIZE,
            verticalalignment='top', bbox=dict(boxstyle='round', facecolor='white', alpha=0.8))

    ax.set_title(f'Section Loads: {result.profile_name or result.profile_id} (kN/m)',
                 fontsize=TITLE_SIZE, fontweight='bold', pad=20)

    ax.set_xlim(bbox.min_x - 0.6 * size, bbox.max_x + 0.6 * size)
    ax.set_ylim(base_y - 0.4 * size, bbox.max_y + 0.2 * size)
    save_diagram(fig, output_path)
    return output_path
