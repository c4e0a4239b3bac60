#!/usr/bin/env python3
"""
Quake Log Tools - Match Report

Parses a Quake III Arena server log (qgames.log) and reports per-match
statistics (total kills, players, kills per player, kills by means of
death) together with a player ranking across all matches.
"""

import argparse
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from quake_log_tools.base import QuakeTool, JSONTool
from quake_log_tools.errors import QuakeLogError
from quake_log_tools.parser.accumulator import Match, ParseSummary, parse_log
from quake_log_tools.parser.grammar import ExtractionStrategy
from quake_log_tools.ranking import PlayerScore, reduce_ranking
from quake_log_tools.report import (
    CSV_HEADERS,
    build_ranking_report,
    build_matches_report,
    export_excel,
    plot_ranking,
    render_json,
    render_report,
    ranking_rows,
)

logger = logging.getLogger(__name__)


class MatchReportTool(JSONTool):
    """
    Builds match statistics and a player ranking from a Quake III log.

    The log is read fully into memory, parsed in one pass and reduced
    into a ranking. Any malformed line stops the run unless lenient
    parsing is enabled.
    """

    REPORT_FORMATS = ("json", "csv", "excel", "chart")
    MENU_OPTIONS = (
        ("1", "Generate match report"),
        ("2", "Show player ranking"),
        ("0", "Exit"),
    )

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 strict: Optional[bool] = None,
                 strategy: Optional[ExtractionStrategy] = None):
        """
        Initialize the MatchReportTool with configuration.

        Args:
            config: Configuration dictionary from Config class
            strict: Override parser.strict from the configuration
            strategy: Override parser.extraction_strategy from the configuration
        """
        super().__init__(config)
        self.initialize_directories()

        self.strict = self.get_config('parser.strict', True) if strict is None else strict
        self.strategy = strategy or ExtractionStrategy.from_name(
            self.get_config('parser.extraction_strategy', ExtractionStrategy.POSITIONAL.value))
        self.max_malformed_samples = self.get_config('parser.max_malformed_samples', 10)
        self.chart_top = self.get_config('report.chart_top', None)

    def read_log(self, log_file: Optional[str] = None) -> str:
        """
        Read the whole game log.

        Args:
            log_file: Path to the log; defaults to paths.log_file

        Returns:
            The log content

        Raises:
            FileNotFoundError: If the log does not exist
            PermissionError: If the log is not readable
        """
        path = log_file or self.log_file
        logger.info(f"Reading game log: {self.resolve_path(path)}")
        return self.read_text(path)

    def analyze(self, content: str) -> Tuple[List[Match], List[PlayerScore], ParseSummary]:
        """
        Parse log content and rank its players.

        Args:
            content: Full text of the log

        Returns:
            Tuple of (matches, ranking, parse_summary)
        """
        logger.debug(f"Parsing with strategy={self.strategy.value} strict={self.strict}")
        matches, summary = parse_log(content, strict=self.strict, strategy=self.strategy,
                                     max_malformed_samples=self.max_malformed_samples)
        ranking = reduce_ranking(matches)
        return matches, ranking, summary

    def export(self, matches: List[Match], ranking: List[PlayerScore],
               formats: List[str]) -> List[str]:
        """
        Write the requested report files into the output directory.

        Args:
            matches: Parsed matches
            ranking: Output of reduce_ranking
            formats: Any of REPORT_FORMATS

        Returns:
            Paths of the written files
        """
        output_files = []

        for report_format in formats:
            if report_format == "json":
                report = dict(build_matches_report(matches))
                report.update(build_ranking_report(ranking))
                file_name = self.generate_timestamped_filename("match_report", "json")
                output_files.append(self.write_json(report, file_name))
            elif report_format == "csv":
                file_name = self.generate_timestamped_filename("player_ranking", "csv")
                output_files.append(self.write_csv(ranking_rows(ranking), file_name, headers=CSV_HEADERS))
            elif report_format == "excel":
                file_name = self.generate_timestamped_filename("match_report", "xlsx")
                output_files.append(export_excel(matches, ranking, self.output_path(file_name)))
            elif report_format == "chart":
                file_name = self.generate_timestamped_filename("player_ranking", "png")
                output_files.append(plot_ranking(ranking, self.output_path(file_name), top=self.chart_top))
            else:
                raise ValueError(f"Unknown report format '{report_format}'. "
                                 f"Valid formats: {', '.join(self.REPORT_FORMATS)}")

        return output_files

    def run(self, log_file: Optional[str] = None, formats: Optional[List[str]] = None,
            print_report: bool = True) -> Dict[str, Any]:
        """
        Run the match report.

        Args:
            log_file: Path to the log; defaults to paths.log_file
            formats: Report files to write; defaults to report.formats
            print_report: Print the JSON report to stdout

        Returns:
            Dictionary with analysis results

        Raises:
            LogParseError: In strict mode, on the first malformed line
        """
        logger.info("Starting match report...")

        if formats is None:
            formats = self.get_config('report.formats', ["json"])

        content = self.read_log(log_file)
        matches, ranking, summary = self.analyze(content)

        if print_report:
            print(render_report(matches, ranking))

        output_files = self.export(matches, ranking, formats)

        if not matches:
            logger.warning("No matches found in the game log.")

        result = {
            "success": bool(matches),
            "match_count": len(matches),
            "player_count": len(ranking),
            "total_kills": sum(match.data.total_kills for match in matches),
            "malformed_lines": summary.malformed_lines,
            "output_files": output_files,
        }

        logger.info(f"Report complete: {result['match_count']} matches, "
                    f"{result['total_kills']} kills, {result['player_count']} players")
        return result

    def show_ranking(self, log_file: Optional[str] = None) -> List[PlayerScore]:
        """Print only the player ranking."""
        _, ranking, _ = self.analyze(self.read_log(log_file))
        print(render_json(build_ranking_report(ranking)))
        return ranking

    def interactive(self, log_file: Optional[str] = None, formats: Optional[List[str]] = None,
                    input_func: Callable[[str], str] = input) -> int:
        """
        Run the interactive menu until the user exits.

        Errors from a menu action are logged and the menu is shown again.

        Returns:
            Exit code (0)
        """
        while True:
            print("Select an option:")
            for key, label in self.MENU_OPTIONS:
                print(f"{key}. {label}")

            try:
                choice = input_func("> ").strip()
            except EOFError:
                return 0

            if choice == "0":
                return 0

            try:
                if choice == "1":
                    self.run(log_file, formats)
                elif choice == "2":
                    self.show_ranking(log_file)
                else:
                    print(f"Invalid option: {choice}")
            except (QuakeLogError, OSError, ValueError) as e:
                logger.error(f"Error: {e}")


def main():
    """
    Main entry point for the match report command line tool.
    """
    parser = argparse.ArgumentParser(
        description="Parse a Quake III Arena log and report match statistics and a player ranking.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --log-file qgames.log
    %(prog)s --format csv --format chart
    %(prog)s --lenient --strategy known_players
    %(prog)s --interactive

Configuration:
    - paths.log_file: Log to read when --log-file is not given
    - general.output_path: Directory for exported files
    - parser.strict / parser.extraction_strategy: Parser behaviour
        """
    )
    parser.add_argument(
        "--log-file",
        help="Path to the Quake III log file. If not specified, uses the configured path."
    )
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=MatchReportTool.REPORT_FORMATS,
        help="Report file to write (repeatable). Defaults to report.formats from the configuration."
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip and log malformed lines instead of stopping at the first one."
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ExtractionStrategy],
        help="How killer and victim names are extracted from kill lines."
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Show a menu to choose the report to run."
    )

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args()

    try:
        config = MatchReportTool.load_config(args.profile)

        strategy = ExtractionStrategy.from_name(args.strategy) if args.strategy else None
        tool = MatchReportTool(config, strict=False if args.lenient else None, strategy=strategy)

        if args.interactive:
            return tool.interactive(args.log_file, args.formats)

        result = tool.run(args.log_file, args.formats)

        if args.console:
            logger.info(f"Match report completed: {result}")

        return 0 if result["success"] else 1

    except Exception as e:
        logger.error(f"Error: {e}")
        if args.console:
            raise
        return 1


if __name__ == "__main__":
    exit(main())
