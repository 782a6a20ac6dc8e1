"""Plugin registry for manifest and lockfile parsers."""

from typing import Dict, List, Optional
from pathlib import Path

from ...compromised.registry import CompromisedRegistry
from .base import BaseParser, RawFinding


class ParserRegistry:
    """Registry of parsers keyed by ecosystem and parser type."""
    
    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[tuple[str, str], BaseParser] = {}
        self._ecosystem_parsers: Dict[str, List[BaseParser]] = {}
    
    def register(self, ecosystem: str, parser_type: str, parser: BaseParser) -> None:
        """Register a parser for an ecosystem and type.
        
        Args:
            ecosystem: Ecosystem name (e.g., 'nodejs')
            parser_type: Parser type (e.g., 'package', 'yarn')
            parser: Parser instance to register
        """
        key = (ecosystem, parser_type)
        self._parsers[key] = parser
        self._ecosystem_parsers.setdefault(ecosystem, []).append(parser)
    
    def get_parser(self, ecosystem: str, parser_type: str) -> Optional[BaseParser]:
        """Get a parser for the specified ecosystem and type.
        
        Args:
            ecosystem: Ecosystem name
            parser_type: Parser type
            
        Returns:
            Parser instance or None if not found
        """
        return self._parsers.get((ecosystem, parser_type))
    
    def find_parser_for_file(self, file_path: Path) -> Optional[BaseParser]:
        """Find a parser that can handle the given file.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Parser that can handle the file or None
        """
        for parser in self._parsers.values():
            if parser.can_parse(file_path):
                return parser
        return None
    
    def get_supported_ecosystems(self) -> List[str]:
        return list(self._ecosystem_parsers.keys())
    
    def get_supported_parser_types(self) -> List[str]:
        return [parser_type for _, parser_type in self._parsers.keys()]
    
    def get_supported_file_names(self) -> List[str]:
        return [parser.file_name for parser in self._parsers.values()]
    
    def parse_content(
        self,
        file_path: Path,
        content: str,
        registry: CompromisedRegistry
    ) -> List[RawFinding]:
        """Parse already-read content with the parser matching file_path.
        
        Returns:
            Findings, or an empty list when no parser handles the file
        """
        parser = self.find_parser_for_file(file_path)
        if parser is None:
            return []
        return parser.parse(content, file_path, registry)
