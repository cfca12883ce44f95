# ========================
# src/sales_metrics/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Sequences reading, parsing, aggregation and reporting, then hands the
reports to the configured sinks.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .ingestion import LineReader
from .models import MonthlyAggregate, ParseResult, RowIssue, SourceLine
from .parsing import RecordParser
from .reports import SalesReport, build_report
from .storage import FileReportSink, emit_report
from .transformation import MonthlyAggregator
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything a finished run produced."""
    input_file: Optional[str]
    report: SalesReport
    parse_stats: Dict[str, Any]
    aggregation_stats: Dict[str, Any]
    issues: List[RowIssue] = field(default_factory=list)
    saved_files: Dict[str, str] = field(default_factory=dict)
    performance: Dict[str, Any] = field(default_factory=dict)

    def summary(self, issue_limit: int = 20) -> Dict[str, Any]:
        """JSON-safe run summary."""
        return {
            'input_file': self.input_file,
            'total_sales': self.report.total_sales,
            'revenue_ranking': self.report.revenue_ranking.value,
            'parse_stats': self.parse_stats,
            'aggregation_stats': self.aggregation_stats,
            'dropped_rows': [
                {'line': i.line_number, 'kind': i.kind, 'detail': i.detail}
                for i in self.issues[:issue_limit]
            ],
        }


class SalesPipeline:
    """
    Orchestrates the sales metrics pipeline.
    Coordinates reading, parsing, aggregating and reporting.
    """

    def __init__(self,
                 input_file: Optional[str] = None,
                 output_dir: Optional[str] = None,
                 chunk_size: Optional[int] = None,
                 config: Optional[Config] = None,
                 sinks: Optional[Iterable[Any]] = None):
        """
        Initialize the pipeline.

        Args:
            input_file (str): Path to the sales log; only needed by run()
            output_dir (str): Directory for report files; None writes no files
            chunk_size (int): Number of lines to read per chunk
            config (Config): Configuration object
            sinks (list): Extra report sinks (e.g. ConsoleReportSink)
        """
        self.config = config or Config()
        self.input_file = input_file
        self.output_dir = output_dir
        self.chunk_size = chunk_size or self.config.DEFAULT_CHUNK_SIZE
        self.sinks = list(sinks or [])

        logger.info("SalesPipeline initialized:")
        logger.info(f"  Input: {self.input_file}")
        logger.info(f"  Output: {self.output_dir}")
        logger.info(f"  Chunk size: {self.chunk_size}")

    def run(self) -> PipelineResult:
        """
        Execute the complete pipeline over the input file.

        Returns:
            PipelineResult: Reports, statistics and saved files

        Raises:
            SourceReadError: The input file cannot be read; nothing is written.
            ReportInvariantError: The reports disagree with the aggregate.
        """
        if not self.input_file:
            raise ValueError("SalesPipeline.run() needs an input_file")

        logger.info(f"Starting sales pipeline for '{self.input_file}'...")
        reader = LineReader(self.input_file)

        with monitor_performance("SalesPipeline") as monitor:
            result = self._process(reader.read_in_chunks(self.chunk_size), monitor)
        result.performance = monitor.summary

        logger.info("Pipeline finished successfully.")
        self._log_final_summary(result)
        return result

    def process_lines(self, lines: Iterable[Union[SourceLine, str]]) -> PipelineResult:
        """Run the pipeline over lines already in memory (line 0 is the header)."""
        numbered = [
            line if isinstance(line, SourceLine) else SourceLine(number, line)
            for number, line in enumerate(lines)
        ]
        return self._process([numbered], monitor=None)

    def _process(self, chunks, monitor) -> PipelineResult:
        parser = RecordParser()
        aggregator = MonthlyAggregator()
        issues: List[RowIssue] = []
        issue_limit = self.config.ISSUE_LOG_LIMIT

        chunk_num = 0
        for chunk in chunks:
            chunk_num += 1
            parsed: ParseResult = parser.parse_lines(chunk)
            logger.info(
                f"Chunk {chunk_num}: {parsed.records_parsed}/{parsed.lines_read} lines parsed, "
                f"{parsed.rows_dropped} dropped"
            )
            # Only the first ISSUE_LOG_LIMIT issues are kept; parse_stats has the full count
            if len(issues) < issue_limit:
                issues.extend(parsed.issues[:issue_limit - len(issues)])
            aggregator.process_chunk(parsed.records)

            if monitor is not None:
                monitor.update_progress(parsed.lines_read)

        aggregate: MonthlyAggregate = aggregator.get_aggregate()
        if monitor is not None:
            monitor.add_checkpoint("aggregated", {'months': len(aggregate)})

        report = build_report(aggregate, self.config.REVENUE_RANKING)
        if monitor is not None:
            monitor.add_checkpoint("reports_built")

        result = PipelineResult(
            input_file=self.input_file,
            report=report,
            parse_stats=parser.get_statistics(),
            aggregation_stats=aggregator.get_aggregation_summary(),
            issues=issues,
        )

        for sink in self.sinks:
            emit_report(report, sink)

        if self.output_dir:
            file_sink = FileReportSink(self.output_dir)
            emit_report(report, file_sink)
            result.saved_files = file_sink.save(result.summary(issue_limit))
            if monitor is not None:
                monitor.add_checkpoint("reports_saved", {'files': len(result.saved_files)})

        return result

    def _log_final_summary(self, result: PipelineResult) -> None:
        """Log final pipeline summary."""
        logger.info("=" * 60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("=" * 60)

        parse_stats = result.parse_stats
        logger.info(f"Input file: {result.input_file}")
        logger.info(f"Lines read: {parse_stats['lines_seen']:,}")
        logger.info(f"Records parsed: {parse_stats['records_parsed']:,}")
        logger.info(f"Rows dropped: {parse_stats['rows_dropped']:,}")
        logger.info(f"Months reported: {result.aggregation_stats['months']}")
        logger.info(f"Total sales: {result.report.total_sales:,.2f}")

        for report_name, file_path in result.saved_files.items():
            logger.info(f"  • {report_name}: {file_path}")

        logger.info("=" * 60)


def run_pipeline(input_file: str,
                 output_dir: Optional[str] = None,
                 config: Optional[Config] = None,
                 sinks: Optional[Iterable[Any]] = None) -> PipelineResult:
    """Read, parse, aggregate and report one sales log."""
    return SalesPipeline(input_file, output_dir, config=config, sinks=sinks).run()
