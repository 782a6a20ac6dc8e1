"""Console and JSON output for scan reports."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.parsers import RawFinding
from ..core.report import ScanReport
from ..utils.logging import get_logger


class ConsoleFormatter:
    """Rich console formatter for scan reports."""
    
    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.
        
        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")
    
    def format_scan_results(self, report: ScanReport) -> None:
        """Print every finding followed by the summary panel.
        
        Args:
            report: Finished scan report
        """
        self.console.print(f"Scanned files: {report.scanned_files_count}")
        self.console.print(f"vulnerabilities: {report.findings_count}")
        
        for finding in report.findings:
            self.console.print(self._finding_line(finding))
        
        self.console.print(self._create_summary_panel(report))
        
    def _finding_line(self, finding: RawFinding) -> Text:
        return Text.assemble(
            ("[Vulnerability Found ❌] ", "bold red"),
            (finding.spec, "cyan"),
            f" in {finding.file} ({finding.source})",
        )
    
    def _create_summary_panel(self, report: ScanReport) -> Panel:
        """Create summary panel.
        
        Args:
            report: Finished scan report
            
        Returns:
            Rich panel with summary
        """
        if report.findings:
            style = "red"
            title = f"Found {report.findings_count} compromised package versions!"
        elif report.inconclusive:
            style = "yellow"
            title = "Scan inconclusive"
        else:
            style = "green"
            title = "No compromised packages found. ✅"
        
        content = (
            f"Root: {report.root}\n"
            f"Scanned files: {report.scanned_files_count}\n"
            f"Findings: {report.findings_count}\n"
            f"Compromised list: {report.compromised_version_count} versions "
            f"of {report.compromised_package_count} packages\n"
            f"Exit code: {int(report.exit_code)}"
        )
        if report.reason:
            content += f"\nReason: {report.reason}"
        
        return Panel(Text(content), title=title, style=style)
    
    def format_error(self, error: str, details: Optional[str] = None) -> None:
        """Format and display error message.
        
        Args:
            error: Error message
            details: Optional error details
        """
        content = Text.assemble(("Error: ", "bold red"), error)
        if details:
            content.append(f"\n\n{details}", style="dim")
        
        self.console.print(Panel(content, style="red"))


class JSONFormatter:
    """Writes scan reports as JSON documents."""
    
    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.
        
        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")
    
    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> Path:
        """Save results to JSON file.
        
        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
            
        Returns:
            The path written
            
        Raises:
            ValueError: If no output file is known
            OSError: If the file cannot be written
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")
        
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        
        self.logger.debug(f"Results saved to {file_path}")
        return Path(file_path)
