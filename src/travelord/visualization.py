#!/usr/bin/env python3
"""
Ranking visualization using folium maps.
"""

from typing import List, Optional, Sequence
import html
import logging
import folium
from folium.template import Template

from .config import TravelordConfig
from .file_utils import PointRecord
from .geometry import Position, calculate_bbox
from .metrics import RankingMetrics
from .ranking import ScoredPosition

logger = logging.getLogger(__name__)

# Marker colours from best to worst ranked
BEST_COLOR = (0x1A, 0x98, 0x50)
WORST_COLOR = (0xD7, 0x30, 0x27)
TRAVEL_LINE_COLOR = "#2E86AB"


class RankingLegend(folium.MacroElement):
    """Custom legend for ranking visualization with dynamic counts."""

    def __init__(self, metrics: RankingMetrics):
        super().__init__()
        self.ranked_count = metrics.ranked_points
        self.total_count = metrics.total_points
        self.best_color = rank_color(0, 2)
        self.worst_color = rank_color(1, 2)

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="ranking-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 230px;
            min-height: 90px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
            box-sizing: border-box;
        ">
            <b>Legend</b><br>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #2E86AB; font-size: 18px;">- -</span>
                Travel Bearing
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: {{ this.best_color }}; font-size: 18px;">&#9679;</span>
                Best Ranked
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: {{ this.worst_color }}; font-size: 18px;">&#9679;</span>
                Worst Ranked
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                Ranked {{ this.ranked_count }} of {{ this.total_count }} points
            </div>
        </div>
        {% endmacro %}
        """
        )


def rank_color(rank: int, count: int) -> str:
    """
    Interpolate a marker colour between best and worst for a rank.

    Args:
        rank: Zero-based rank
        count: Number of ranked points

    Returns:
        Hex colour string
    """
    fraction = rank / (count - 1) if count > 1 else 0.0
    channels = [
        round(best + (worst - best) * fraction)
        for best, worst in zip(BEST_COLOR, WORST_COLOR)
    ]
    return "#{:02X}{:02X}{:02X}".format(*channels)


def scored_position_to_html(
    rank: int, scored: ScoredPosition, record: Optional[PointRecord] = None
) -> str:
    """
    Format a ranked point into HTML for popup display.

    Args:
        rank: One-based rank
        scored: The ranked point
        record: Input record the point came from, for its name and extra fields

    Returns:
        HTML-formatted string
    """
    position = scored.position
    record = record or {}
    html_parts = [f"<b>#{rank}</b>"]

    # Add name most prominently if present
    if record.get("name"):
        html_parts.append(f" <b>{html.escape(str(record['name']))}</b>")

    html_parts.append(
        f"<br><b>Score:</b> {scored.score:.4f}"
        f"<br><b>Distance:</b> {scored.distance:.2f} km"
        f"<br><b>Bearing difference:</b> {scored.bearing_diff:.2f}&deg;"
        f"<br><i>{position.latitude:.6f}, {position.longitude:.6f}</i>"
    )

    other_data = {k: v for k, v in record.items() if k not in ["lat", "lng", "name"]}
    if other_data:
        html_parts.append("<br><b>Other:</b>")
        for key, value in sorted(other_data.items()):
            html_parts.append(
                f"<br>&nbsp;&nbsp;<i>{html.escape(str(key))}:</i> "
                f"{html.escape(str(value))}"
            )

    return "".join(html_parts)


def create_ranking_map(
    start: Position,
    end: Position,
    scored: Sequence[ScoredPosition],
    output_filename: str,
    metrics: RankingMetrics,
    config: TravelordConfig,
    records: Optional[Sequence[PointRecord]] = None,
) -> None:
    """
    Create an interactive map showing the travel line and ranked points, save as HTML.

    Args:
        start: Start position
        end: End position
        scored: Ranked points, best first
        output_filename: Path where HTML map file should be saved
        metrics: RankingMetrics for the legend
        config: Configuration object containing settings like map_buffer
        records: Input records aligned with scored, shown in the popups
    """
    shown: List[Position] = [start, end] + [s.position for s in scored]
    south, west, north, east = calculate_bbox(shown, config.map_buffer)

    center_lat = (south + north) / 2
    center_lon = (west + east) / 2

    logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

    ranking_map = folium.Map(
        location=[center_lat, center_lon],
        tiles=None,
    )

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(ranking_map)

    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(ranking_map)

    folium.LayerControl().add_to(ranking_map)

    folium.PolyLine(
        [[start.latitude, start.longitude], [end.latitude, end.longitude]],
        color=TRAVEL_LINE_COLOR,
        weight=2,
        opacity=0.6,
        dash_array="8",
        popup="Travel bearing",
        z_index=1,
    ).add_to(ranking_map)

    folium.Marker(
        [start.latitude, start.longitude],
        popup="Start",
        icon=folium.Icon(color="green", icon="play"),
    ).add_to(ranking_map)

    folium.Marker(
        [end.latitude, end.longitude],
        popup="End",
        icon=folium.Icon(color="red", icon="stop"),
    ).add_to(ranking_map)

    for rank, point in enumerate(scored):
        color = rank_color(rank, len(scored))
        record = records[rank] if records is not None else None
        tooltip = f"#{rank + 1}"
        if record and record.get("name"):
            tooltip += f" {html.escape(str(record['name']))}"
        folium.CircleMarker(
            [point.position.latitude, point.position.longitude],
            radius=6,
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=0.8,
            tooltip=tooltip,
            popup=folium.Popup(
                scored_position_to_html(rank + 1, point, record), max_width=300
            ),
        ).add_to(ranking_map)

    ranking_map.add_child(RankingLegend(metrics))

    ranking_map.fit_bounds([[south, west], [north, east]])

    ranking_map.save(output_filename)

    logger.debug(
        f"Map saved to {output_filename} with {metrics.ranked_points}/{metrics.total_points} ranked points"
    )
