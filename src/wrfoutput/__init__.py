"""Streaming extraction of WRF output file records from rsl.out logs."""

__version__ = "0.3.0"

from wrfoutput.analyzer import parse, parse_file
from wrfoutput.config import ParserConfig
from wrfoutput.errors import WrfOutputError
from wrfoutput.models import ALL, Filter, OutputFile
from wrfoutput.parsers.rsl import RslParser
from wrfoutput.stream.results import ResultStream

__all__ = [
    "ALL",
    "Filter",
    "OutputFile",
    "ParserConfig",
    "ResultStream",
    "RslParser",
    "WrfOutputError",
    "parse",
    "parse_file",
]
