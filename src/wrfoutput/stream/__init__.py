"""Blocking handoff pipeline between parser, watchdog and consumer."""
