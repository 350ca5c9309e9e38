"""Parsers for WRF rsl.out log lines."""
