"""
Match and ranking reports.

Shapes parsed matches and the player ranking into the report structures
printed by the match report tool, and exports them as JSON text, CSV
rows, an Excel workbook or a ranking chart.

Report layout:
    {"matches": [{"game_1": {"total_kills": 21, "players": [...],
                             "kills": {...}, "kills_by_means": {...}}}, ...]}
    {"Player Ranking": [{"Oootsimo": 3}, {"Dono da Bola": 2}, ...]}
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from openpyxl.utils import get_column_letter
import pandas as pd

from .errors import ReportError
from .parser.accumulator import Match
from .ranking import PlayerScore

logger = logging.getLogger(__name__)

RANKING_KEY = "Player Ranking"
MATCHES_KEY = "matches"
CSV_HEADERS = ["Rank", "Player", "Kills"]


def match_to_dict(match: Match) -> Dict[str, Any]:
    """Shape one match as ``{"game_<id>": {...}}``."""
    data = match.data
    return {
        match.name: {
            "total_kills": data.total_kills,
            "players": sorted(data.players),
            "kills": dict(data.kills),
            "kills_by_means": dict(data.kills_by_means),
        }
    }


def build_matches_report(matches: Iterable[Match]) -> Dict[str, List[Dict[str, Any]]]:
    return {MATCHES_KEY: [match_to_dict(match) for match in sorted(matches, key=lambda m: m.id)]}


def build_ranking_report(ranking: Iterable[PlayerScore]) -> Dict[str, List[Dict[str, int]]]:
    return {RANKING_KEY: [{score.name: score.kills} for score in ranking]}


def render_json(data: Any, indent: int = 2) -> str:
    """
    Serialise a report structure to JSON text.

    Raises:
        ReportError: If the structure cannot be serialised
    """
    try:
        return json.dumps(data, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ReportError(f"Failed to serialise report: {e}")


def render_report(matches: Iterable[Match], ranking: Iterable[PlayerScore], indent: int = 2) -> str:
    """
    Render the full report: all matches followed by the player ranking.

    Args:
        matches: Parsed matches
        ranking: Output of reduce_ranking
        indent: JSON indentation

    Returns:
        Two pretty-printed JSON documents separated by a newline
    """
    return "\n".join([
        render_json(build_matches_report(matches), indent),
        render_json(build_ranking_report(ranking), indent),
    ])


def ranking_rows(ranking: Iterable[PlayerScore]) -> List[Dict[str, Any]]:
    """Rows for the ranking CSV export, ranks starting at 1."""
    return [
        {"Rank": rank, "Player": score.name, "Kills": score.kills}
        for rank, score in enumerate(ranking, start=1)
    ]


def means_of_death_totals(matches: Iterable[Match]) -> Counter:
    """Count every death cause across all matches."""
    totals = Counter()
    for match in matches:
        totals.update(match.data.kills_by_means)
    return totals


def _match_rows(matches: Iterable[Match]) -> List[Dict[str, Any]]:
    rows = []
    for match in sorted(matches, key=lambda m: m.id):
        for player in sorted(set(match.data.players) | set(match.data.kills)):
            rows.append({
                "Match": match.name,
                "Player": player,
                "Kills": match.data.kills.get(player, 0),
                "Match Total Kills": match.data.total_kills,
            })
    return rows


def _autofit_columns(worksheet):
    for idx, column in enumerate(worksheet.columns, 1):
        width = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        letter = get_column_letter(idx)
        worksheet.column_dimensions[letter].width = min(width + 2, 60)


def export_excel(matches: List[Match], ranking: List[PlayerScore], excel_path: str) -> str:
    """
    Write matches, ranking and means-of-death totals to an Excel workbook.

    Args:
        matches: Parsed matches
        ranking: Output of reduce_ranking
        excel_path: Destination .xlsx path

    Returns:
        Path of the written workbook

    Raises:
        ReportError: If the workbook cannot be written
    """
    matches_df = pd.DataFrame(_match_rows(matches), columns=["Match", "Player", "Kills", "Match Total Kills"])
    ranking_df = pd.DataFrame(ranking_rows(ranking), columns=CSV_HEADERS)
    means_df = pd.DataFrame(
        sorted(means_of_death_totals(matches).items(), key=lambda x: x[1], reverse=True),
        columns=["Means of Death", "Kills"],
    )

    try:
        with pd.ExcelWriter(excel_path, engine='openpyxl') as writer:
            for sheet_name, df in (("Matches", matches_df), ("Ranking", ranking_df), ("Means of Death", means_df)):
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                _autofit_columns(writer.sheets[sheet_name])
    except (OSError, ValueError) as e:
        raise ReportError(f"Failed to write Excel report {excel_path}: {e}")

    logger.info(f"Excel report written to {excel_path}")
    return excel_path


def plot_ranking(ranking: List[PlayerScore], output_path: str, top: Optional[int] = None,
                 title: str = "Player Ranking") -> str:
    """
    Draw the ranking as a horizontal bar chart.

    Args:
        ranking: Output of reduce_ranking
        output_path: Destination image path (.png)
        top: Only plot the first N players
        title: Chart title

    Returns:
        Path of the written image
    """
    scores = ranking[:top] if top else ranking
    names = [score.name for score in scores]
    kills = [score.kills for score in scores]

    fig, ax = plt.subplots(figsize=(10, max(3, 0.5 * len(scores) + 1)))
    try:
        colors = ['tab:green' if k >= 0 else 'tab:red' for k in kills]
        ax.barh(names, kills, color=colors)
        ax.invert_yaxis()  # highest score on top
        ax.axvline(0, color='black', linewidth=0.8)
        ax.set_xlabel("Kills")
        ax.set_title(title, fontsize=14, fontweight='bold')
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=100, bbox_inches='tight', facecolor='white')
    except OSError as e:
        raise ReportError(f"Failed to write ranking chart {output_path}: {e}")
    finally:
        plt.close(fig)

    logger.info(f"Ranking chart written to {output_path}")
    return output_path
