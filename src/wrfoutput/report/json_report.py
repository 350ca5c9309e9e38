"""JSON-lines serialization of output file records."""

import dataclasses
import json
import logging
import threading
from datetime import datetime
from typing import IO, Iterable, Union

from wrfoutput.analyzer import parse
from wrfoutput.config import DEFAULT_TIMEOUT, ParserConfig
from wrfoutput.errors import MarshalError, UnmarshalError
from wrfoutput.models import OutputFile
from wrfoutput.parsers.rsl import Line
from wrfoutput.stream.handoff import Handoff, HandoffClosed
from wrfoutput.stream.results import ResultStream
from wrfoutput.stream.watchdog import LivenessWatchdog

_LOG = logging.getLogger(__name__)

# Unmarshalled streams come from a producer that already finished parsing,
# so the silence tolerated between records can be generous.
UNMARSHAL_TIMEOUT = 1.0


class RecordEncoder(json.JSONEncoder):
    """Custom JSON encoder for OutputFile dataclasses."""

    def default(self, obj):
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return record_to_dict(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def record_to_dict(record: OutputFile) -> dict:
    """Convert an OutputFile to a JSON-serializable dictionary."""
    result = {}
    for f in dataclasses.fields(record):
        value = getattr(record, f.name)
        if isinstance(value, datetime):
            value = value.isoformat()
        result[f.name] = value
    return result


def record_from_dict(data: dict) -> OutputFile:
    try:
        return OutputFile(
            kind=str(data["kind"]),
            domain=int(data["domain"]),
            instant=datetime.fromisoformat(data["instant"]),
            hour_offset=int(data["hour_offset"]),
            filename=str(data["filename"]),
        )
    except KeyError as e:
        raise ValueError(f"missing field {e}") from e


def write_json_lines(
    source: Iterable[Line], out: IO[str], timeout: float = DEFAULT_TIMEOUT
) -> int:
    """Parse a WRF log and write one JSON object per record to ``out``.

    Returns the number of records written. Raises the stream failure, or a
    MarshalError when ``out`` cannot be written.
    """
    written = 0
    for record in parse(source, timeout=timeout).records():
        try:
            out.write(json.dumps(record, cls=RecordEncoder) + "\n")
            out.flush()
        except OSError as e:
            raise MarshalError(e) from e
        written += 1
    return written


def read_json_lines(
    lines: Iterable[Union[str, bytes]], timeout: float = UNMARSHAL_TIMEOUT
) -> ResultStream:
    """Turn the output of write_json_lines back into a record stream."""
    config = ParserConfig(timeout=timeout)
    handoff = Handoff("unmarshal handoff")
    outbox = Handoff("result stream")

    def feed():
        try:
            for line in lines:
                try:
                    if isinstance(line, bytes):
                        line = line.decode("utf-8")
                    if not line.strip():
                        continue
                    record = record_from_dict(json.loads(line))
                except (ValueError, TypeError) as e:
                    handoff.send(UnmarshalError(e))
                    return
                handoff.send(record)
        except HandoffClosed:
            _LOG.debug("unmarshalled stream abandoned downstream")
        except Exception as e:
            try:
                handoff.send(UnmarshalError(e))
            except HandoffClosed:
                _LOG.debug("unmarshalled stream abandoned downstream")
        finally:
            handoff.close()

    LivenessWatchdog(handoff, outbox, config.timeout).start()
    threading.Thread(target=feed, name="wrfoutput-unmarshal", daemon=True).start()
    return ResultStream(outbox)
