"""Async orchestration of a single scan run.

A run loads the compromised registry once, walks the root for candidate
files, reads and parses those files concurrently, then merges the per-file
results back in directory-enumeration order before deduplicating and
assembling the report. Concurrency never changes the output: for a fixed
tree, two scans produce the same file order and the same finding order.

Public API:
    ScannerConfig: Settings for a run
    Scanner: Orchestrator class
    scan_directory: Blocking convenience wrapper
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..compromised.offline import load_compromised_file_async
from ..compromised.online import CompromisedListClient
from ..compromised.registry import CompromisedRegistry
from ..utils.logging import get_logger
from ..utils.path_utils import CandidateFile, CandidateFileFinder
from ..utils.performance import PerformanceMonitor
from .matcher import FindingMatcher
from .parsers import RawFinding, ParserRegistry, registry as default_parsers
from .report import ScanReport, assemble_report

DEFAULT_JSON_OUT = Path("scan-results.json")
DEFAULT_MAX_CONCURRENT = 8


@dataclass
class ScannerConfig:
    """Configuration for a scan run."""

    root: Path = field(default_factory=Path.cwd)
    compromised_file: Optional[Path] = None
    compromised_url: Optional[str] = None
    json_out: Path = DEFAULT_JSON_OUT
    max_concurrent: int = DEFAULT_MAX_CONCURRENT

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {self.max_concurrent}")
        self.root = Path(self.root).resolve()
        self.json_out = Path(self.json_out).resolve()
        if self.compromised_file is not None:
            self.compromised_file = Path(self.compromised_file)


@dataclass(frozen=True)
class FileScanResult:
    """Outcome of reading and parsing one candidate file."""

    candidate: CandidateFile
    findings: Tuple[RawFinding, ...] = ()
    readable: bool = True


class Scanner:
    """Runs the detection pipeline against a project tree.

    Example::

        scanner = Scanner(ScannerConfig(root=Path("./my-project")))
        report = asyncio.run(scanner.scan())
        print(report.findings_count, report.exit_code)
    """

    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        registry: Optional[CompromisedRegistry] = None,
        parsers: Optional[ParserRegistry] = None,
        performance_monitor: Optional[PerformanceMonitor] = None,
    ) -> None:
        """Initialise the Scanner.

        Args:
            config: Run settings; defaults scan the working directory
            registry: Preloaded registry; when None it is loaded from the
                configured URL or file at the start of each scan
            parsers: Parser dispatch table
            performance_monitor: Collects phase timings
        """
        self.config = config or ScannerConfig()
        self.logger = get_logger("Scanner")
        self.parsers = parsers or default_parsers
        self.finder = CandidateFileFinder()
        self.performance_monitor = performance_monitor or PerformanceMonitor(enabled=False)
        self._registry = registry

    async def load_registry(self) -> CompromisedRegistry:
        """Load the compromised registry for this run.

        A configured URL takes precedence over the file. A failed download
        yields an empty registry; an unreadable file raises.

        Raises:
            RegistryLoadError: If the registry file cannot be read
        """
        if self._registry is not None:
            return self._registry

        with self.performance_monitor.measure("load_registry"):
            if self.config.compromised_url:
                async with CompromisedListClient() as client:
                    registry = await client.fetch_registry(self.config.compromised_url)
            else:
                registry = await load_compromised_file_async(self.config.compromised_file)

        self.logger.debug(
            f"Registry holds {registry.version_count} versions of {registry.package_count} packages"
        )
        return registry

    async def scan(self, root: Optional[Path] = None) -> ScanReport:
        """Scan a directory tree for compromised package versions.

        Args:
            root: Directory to scan; defaults to the configured root

        Returns:
            The assembled ScanReport

        Raises:
            FileNotFoundError: If root does not exist
            NotADirectoryError: If root is not a directory
            RegistryLoadError: If the registry file cannot be read
        """
        root = Path(root).resolve() if root is not None else self.config.root
        if not root.exists():
            raise FileNotFoundError(f"Scan root does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Scan root is not a directory: {root}")

        registry = await self.load_registry()
        matcher = FindingMatcher(registry)
        loop = asyncio.get_running_loop()

        with ThreadPoolExecutor(max_workers=self.config.max_concurrent) as executor:
            with self.performance_monitor.measure("walk"):
                candidates = await loop.run_in_executor(
                    executor, self.finder.find_candidate_files, root
                )
            self.logger.debug(f"Found {len(candidates)} candidate files under {root}")

            semaphore = asyncio.Semaphore(self.config.max_concurrent)

            async def scan_with_semaphore(candidate: CandidateFile) -> FileScanResult:
                async with semaphore:
                    return await loop.run_in_executor(
                        executor, self.scan_file, candidate, registry
                    )

            with self.performance_monitor.measure("parse"):
                # gather keeps submission order, i.e. directory-enumeration order
                results: List[FileScanResult] = await asyncio.gather(
                    *(scan_with_semaphore(candidate) for candidate in candidates)
                )

        with self.performance_monitor.measure("assemble"):
            scanned = [result.candidate for result in results if result.readable]
            findings = matcher.merge(result.findings for result in results)
            report = assemble_report(findings, scanned, registry, root)

        return report

    def scan_file(self, candidate: CandidateFile, registry: CompromisedRegistry) -> FileScanResult:
        """Read and parse one candidate file.

        Unreadable files are skipped and reported as not scanned. A file that
        was read but could not be parsed counts as scanned with no findings.
        """
        try:
            with open(candidate.path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.debug(f"Skipping unreadable file {candidate.path}: {e}")
            return FileScanResult(candidate=candidate, readable=False)

        try:
            findings = self.parsers.parse_content(candidate.path, content, registry)
        except Exception as e:
            self.logger.warning(f"Failed to parse {candidate.path}: {e!r}")
            return FileScanResult(candidate=candidate)
        return FileScanResult(candidate=candidate, findings=tuple(findings))


def scan_directory(
    root: Union[str, Path],
    compromised_file: Optional[Union[str, Path]] = None,
    registry: Optional[CompromisedRegistry] = None,
) -> ScanReport:
    """Convenience function to run a full scan and block until it completes.

    Args:
        root: Directory to scan
        compromised_file: Registry file; the packaged list when None
        registry: Preloaded registry, overriding compromised_file

    Returns:
        The assembled ScanReport
    """
    config = ScannerConfig(
        root=Path(root),
        compromised_file=Path(compromised_file) if compromised_file else None,
    )
    return asyncio.run(Scanner(config, registry=registry).scan())
