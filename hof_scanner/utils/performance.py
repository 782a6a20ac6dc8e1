"""Timing helpers for scan phases."""

import functools
import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar
from rich.console import Console
from rich.table import Table

F = TypeVar('F', bound=Callable[..., Any])

BENCHMARK_ENV_VAR = "HOF_SCANNER_VERBOSE_BENCHMARK"


@dataclass
class PerformanceMetrics:
    """Timing of a single measured operation."""
    
    function_name: str
    execution_time: float
    calls: int = 1


class PerformanceMonitor:
    """Collects wall-clock timings for named operations."""
    
    def __init__(self, enabled: bool = True, console: Optional[Console] = None) -> None:
        self.metrics: List[PerformanceMetrics] = []
        self.enabled = enabled
        self.console = console or Console()
    
    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """Context manager for measuring performance.
        
        Args:
            name: Name of the operation being measured
            
        Yields:
            None
        """
        if not self.enabled:
            yield
            return
        
        start_time = time.perf_counter()
        try:
            yield
        finally:
            self.metrics.append(PerformanceMetrics(
                function_name=name,
                execution_time=time.perf_counter() - start_time,
            ))
    
    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary.
        
        Returns:
            Dictionary with performance summary
        """
        if not self.metrics:
            return {}
        
        total_time = sum(m.execution_time for m in self.metrics)
        
        return {
            "total_executions": len(self.metrics),
            "total_time": total_time,
            "average_time": total_time / len(self.metrics),
            "metrics": self.metrics,
        }
    
    def print_summary(self) -> None:
        """Print performance summary to console."""
        summary = self.get_summary()
        if not summary:
            return
        
        table = Table(title="Performance Summary")
        table.add_column("Operation", style="cyan")
        table.add_column("Time", style="green")
        
        for metric in summary["metrics"]:
            table.add_row(metric.function_name, f"{metric.execution_time:.4f}s")
        table.add_row("Total", f"{summary['total_time']:.4f}s", style="bold")
        
        self.console.print(table)


def benchmark(func: F) -> F:
    """Simple benchmark decorator.
    
    Timings are logged only when HOF_SCANNER_VERBOSE_BENCHMARK is set.
    
    Args:
        func: Function to benchmark
        
    Returns:
        Wrapped function with timing
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        end_time = time.perf_counter()
        
        if os.environ.get(BENCHMARK_ENV_VAR):
            logger = logging.getLogger("Performance")
            logger.info(f"{func.__name__} took {end_time - start_time:.4f} seconds")
        return result
    return wrapper  # type: ignore[return-value]
