"""
slabsite/analysis/plot.py

Interactive report for one slab + adsorption analysis.

All figures are built with the Plotly Python library.  Each panel is a plain
function returning a plotly.graph_objects.Figure, so they can be used on
their own from a notebook or script.

Usage from the command line
---------------------------
    slabsite report "Au(111)" CO                  # writes slabsite_report.html
    slabsite report "Cu(100)" OH --output cu.html --seed 7

Usage from Python
-----------------
    from slabsite import build, analyze
    from slabsite.analysis.plot import fig_structure, fig_site_energies, build_report

    slab = build("Au(111)")
    result = analyze(slab, "CO")

    fig_structure(slab, result).show()
    fig_site_energies(result).show()
    build_report(slab, result, "report.html")

Dependencies
------------
    plotly     pip install plotly
"""

from __future__ import annotations

from itertools import combinations
from pathlib import Path

import numpy as np

from slabsite.sites.models import SITE_TYPE, AnalysisResult
from slabsite.structure.models import MaterialStructure


# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

BG       = "#07090e"
PAPER    = "#0d1018"
GRID     = "#182030"
TEXT     = "#a8bcd4"
MUTED    = "#304050"

SITE_COLORS = {
    SITE_TYPE.TOP:    "#e05050",
    SITE_TYPE.BRIDGE: "#50a8e8",
    SITE_TYPE.HOLLOW: "#3cc890",
    SITE_TYPE.FCC:    "#3cc890",
    SITE_TYPE.HCP:    "#40c8c8",
}

BOND_COLOR = "#506070"
CELL_COLOR = "#304050"

#: Bond drawn when distance < BOND_TOLERANCE · (r1 + r2)
BOND_TOLERANCE = 1.15

#: Marker size (px) per Å of covalent radius
ATOM_SCALE = 14.0


# ---------------------------------------------------------------------------
# Shared layout helper
# ---------------------------------------------------------------------------

def _base_layout(**extra):
    """Return a dict of layout kwargs applying the dark theme."""
    layout = dict(
        paper_bgcolor=PAPER,
        plot_bgcolor=BG,
        font=dict(family="IBM Plex Mono, monospace", color=TEXT, size=11),
        legend=dict(
            bgcolor="rgba(0,0,0,0)",
            bordercolor=GRID,
            borderwidth=1,
            font=dict(size=10),
        ),
        margin=dict(l=54, r=20, t=36, b=44),
    )
    layout.update(extra)
    return layout


def _scene_axes():
    axis = dict(
        backgroundcolor=BG, gridcolor=GRID, zerolinecolor=GRID,
        color=TEXT, showspikes=False,
    )
    return dict(
        xaxis=dict(title="x (Å)", **axis),
        yaxis=dict(title="y (Å)", **axis),
        zaxis=dict(title="z (Å)", **axis),
        aspectmode="data",
    )


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------

def infer_bonds(
    structure: MaterialStructure,
    tolerance: float = BOND_TOLERANCE,
) -> list[tuple[int, int]]:
    """
    Atom index pairs closer than tolerance × the sum of their display radii.

    Periodic images are not considered; the bonds are for display only.
    """
    atoms = structure.atoms
    bonds = []
    for i, j in combinations(range(len(atoms)), 2):
        a1, a2 = atoms[i], atoms[j]
        dist = float(np.linalg.norm(a1.position - a2.position))
        if 0.1 < dist < tolerance * (a1.display_radius + a2.display_radius):
            bonds.append((i, j))
    return bonds


def _segments(pairs):
    """Flatten point pairs into x, y, z lists separated by None."""
    xs, ys, zs = [], [], []
    for p, q in pairs:
        xs += [p[0], q[0], None]
        ys += [p[1], q[1], None]
        zs += [p[2], q[2], None]
    return xs, ys, zs


def _cell_edges(cell: np.ndarray):
    """The 12 edges of the parallelepiped spanned by cell rows."""
    a, b, c = cell
    o = np.zeros(3)
    corners = [o, a, b, c, a + b, a + c, b + c, a + b + c]
    edges = []
    for p, q in combinations(range(8), 2):
        diff = corners[q] - corners[p]
        # an edge is a difference equal to exactly one cell vector
        if any(np.allclose(diff, v) for v in (a, b, c)):
            edges.append((corners[p], corners[q]))
    return edges


# ---------------------------------------------------------------------------
# Panel 1: 3-D structure with sites
# ---------------------------------------------------------------------------

def fig_structure(
    structure: MaterialStructure,
    result: AnalysisResult | None = None,
    show_bonds: bool = True,
    show_cell: bool = True,
):
    """
    3-D scatter of the slab, optionally with the ranked adsorption sites.

    Atoms use their display colour and radius.  Sites are diamonds coloured
    by site type and labelled with their rank.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    import plotly.graph_objects as go

    fig = go.Figure()

    if show_cell:
        xs, ys, zs = _segments(_cell_edges(structure.cell))
        fig.add_trace(go.Scatter3d(
            x=xs, y=ys, z=zs,
            mode="lines",
            line=dict(color=CELL_COLOR, width=2),
            hoverinfo="skip",
            name="cell",
        ))

    if show_bonds and structure.atoms:
        pairs = [
            (structure.atoms[i].position, structure.atoms[j].position)
            for i, j in infer_bonds(structure)
        ]
        if pairs:
            xs, ys, zs = _segments(pairs)
            fig.add_trace(go.Scatter3d(
                x=xs, y=ys, z=zs,
                mode="lines",
                line=dict(color=BOND_COLOR, width=3),
                hoverinfo="skip",
                name="bonds",
            ))

    if structure.atoms:
        fig.add_trace(go.Scatter3d(
            x=[a.x for a in structure.atoms],
            y=[a.y for a in structure.atoms],
            z=[a.z for a in structure.atoms],
            mode="markers",
            name=structure.formula,
            marker=dict(
                size=[a.display_radius * ATOM_SCALE for a in structure.atoms],
                color=[a.display_color for a in structure.atoms],
                opacity=0.9,
                line=dict(width=0),
            ),
            text=[f"#{a.id} {a.element}" for a in structure.atoms],
            hovertemplate="%{text}<br>(%{x:.2f}, %{y:.2f}, %{z:.2f})<extra></extra>",
        ))

    if result is not None:
        for site_type in sorted({s.site_type for s in result.sites}):
            ranked = [
                (rank, s) for rank, s in enumerate(result.sites, 1)
                if s.site_type == site_type
            ]
            fig.add_trace(go.Scatter3d(
                x=[s.coordinates[0] for _, s in ranked],
                y=[s.coordinates[1] for _, s in ranked],
                z=[s.coordinates[2] for _, s in ranked],
                mode="markers+text",
                name=site_type,
                marker=dict(
                    size=7, symbol="diamond",
                    color=SITE_COLORS.get(site_type, TEXT),
                ),
                text=[str(rank) for rank, _ in ranked],
                textfont=dict(color=TEXT, size=10),
                customdata=[[s.id, s.energy, s.description] for _, s in ranked],
                hovertemplate=(
                    "%{customdata[0]}<br>%{customdata[2]}<br>"
                    "E = %{customdata[1]:.3f} eV<extra></extra>"
                ),
            ))

    fig.update_layout(**_base_layout(
        title=dict(
            text=f"{structure.formula}{structure.miller_index}  ·  {structure.n_atoms} atoms",
            font=dict(size=12, color=TEXT),
        ),
        scene=_scene_axes(),
    ))
    return fig


# ---------------------------------------------------------------------------
# Panel 2: site energies
# ---------------------------------------------------------------------------

def fig_site_energies(result: AnalysisResult):
    """
    Horizontal bar chart of site binding energies, most stable at the top.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    import plotly.graph_objects as go

    fig = go.Figure()

    if not result.sites:
        fig.add_annotation(
            text="no adsorption sites",
            xref="paper", yref="paper", x=0.5, y=0.5,
            showarrow=False,
            font=dict(color=MUTED, size=12, family="IBM Plex Mono, monospace"),
        )
        fig.update_layout(**_base_layout(
            title=dict(text="Site Energies", font=dict(size=12, color=TEXT)),
        ))
        return fig

    sites = list(result.sites)
    fig.add_trace(go.Bar(
        x=[s.energy for s in sites],
        y=[s.id for s in sites],
        orientation="h",
        marker=dict(color=[SITE_COLORS.get(s.site_type, TEXT) for s in sites]),
        text=[s.site_type for s in sites],
        customdata=[s.description for s in sites],
        hovertemplate="%{y}<br>%{customdata}<br>E = %{x:.3f} eV<extra></extra>",
        name="binding energy",
        showlegend=False,
    ))

    fig.update_layout(**_base_layout(
        title=dict(text="Site Energies", font=dict(size=12, color=TEXT)),
        xaxis=dict(
            title="binding energy (eV)",
            gridcolor=GRID, zerolinecolor=GRID, linecolor=MUTED,
        ),
        yaxis=dict(
            autorange="reversed",
            gridcolor=GRID, zerolinecolor=GRID, linecolor=MUTED,
        ),
    ))
    return fig


# ---------------------------------------------------------------------------
# Combined report
# ---------------------------------------------------------------------------

def build_report(
    structure: MaterialStructure,
    result: AnalysisResult,
    output_path: str | Path = "slabsite_report.html",
    adsorbate: str = "",
) -> Path:
    """
    Place the structure and energy panels side by side and write HTML.

    Parameters
    ----------
    structure:
        The analysed slab.
    result:
        Output of analyze() for that slab.
    output_path:
        Destination HTML file.
    adsorbate:
        Label shown in the header.

    Returns
    -------
    Path
        The output file that was written.
    """
    from plotly.subplots import make_subplots

    fig = make_subplots(
        rows=1, cols=2,
        specs=[[{"type": "scene"}, {"type": "xy"}]],
        column_widths=[0.62, 0.38],
        subplot_titles=[
            f"{structure.formula}{structure.miller_index}",
            "Site Energies",
        ],
        horizontal_spacing=0.08,
    )

    for trace in fig_structure(structure, result).data:
        fig.add_trace(trace, row=1, col=1)
    for trace in fig_site_energies(result).data:
        fig.add_trace(trace, row=1, col=2)

    fig.update_scenes(**_scene_axes())
    fig.update_xaxes(
        title_text="binding energy (eV)",
        gridcolor=GRID, zerolinecolor=GRID, linecolor=MUTED, row=1, col=2,
    )
    fig.update_yaxes(
        autorange="reversed",
        gridcolor=GRID, zerolinecolor=GRID, linecolor=MUTED, row=1, col=2,
    )

    header = "  ·  ".join(part for part in (
        f"{adsorbate} on {structure.formula}{structure.miller_index}" if adsorbate
        else f"{structure.formula}{structure.miller_index}",
        f"{structure.reference_id}",
        f"{result.n_sites} sites",
        result.potential_label,
    ) if part)

    fig.update_layout(**_base_layout(
        height=640,
        title=dict(
            text=f"<b>slabsite</b>  ·  {header}",
            font=dict(size=12, color=TEXT, family="IBM Plex Mono, monospace"),
            x=0.01, xanchor="left",
        ),
        margin=dict(l=24, r=24, t=56, b=44),
    ))

    for ann in fig.layout.annotations:
        ann.font = dict(size=11, color=TEXT, family="IBM Plex Mono, monospace")

    output_path = Path(output_path)
    fig.write_html(
        str(output_path),
        include_plotlyjs="cdn",
        full_html=True,
        config={"displayModeBar": True, "responsive": True},
    )
    return output_path
