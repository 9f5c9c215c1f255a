"""
XferFaxLog Service - appends CDRs to a HylaFAX compatible xferfaxlog file.

Each record is one line of 19 TAB separated fields. Text fields are wrapped
in double quotes at fixed positions of the template, numbers are not.
"""

import logging
import threading

from services.errors import SinkUnavailableError, SinkWriteError
from services.field_encoder import format_duration

logger = logging.getLogger(__name__)

# 19 fields
XLOG_FORMAT = (
    '{}\t{}\t{}\t{}\t{}\t"{}"\t{}\t"{}"\t"{}"\t{}\t{}\t{}\t{}'
    '\t"{}"\t"{}"\t"{}"\t"{}"\t"{}"\t"{}"'
)

SINK_NAME = 'xferfaxlog'

# TAB and line breaks inside a value would split the record
_FIELD_BREAKS = str.maketrans({"\t": " ", "\r": " ", "\n": " "})

# Serializes appends within the process so lines never interleave
_append_lock = threading.Lock()


def append_to(path, line):
    """Append one line to path, opening and closing the file for the write."""
    with _append_lock:
        try:
            f = open(path, 'a', encoding='utf-8')
        except OSError as e:
            raise SinkUnavailableError(SINK_NAME, f"Cannot open {path}: {e}") from e
        with f:
            try:
                f.write(line + '\n')
                f.flush()
            except (OSError, ValueError) as e:
                # ValueError covers text that cannot be encoded, e.g. lone surrogates
                raise SinkWriteError(SINK_NAME, f"Cannot append to {path}: {e}") from e


def _format_line(*fields):
    """Fill the template, keeping each text field on one line and in one column."""
    return XLOG_FORMAT.format(*(
        f.translate(_FIELD_BREAKS) if isinstance(f, str) else f for f in fields
    ))


def format_transmission_report(record, ts_format):
    return _format_line(
        record.timestamp.strftime(ts_format), 'SEND', record.comm_id, record.device_id,
        record.job_id, record.job_tag, record.local_identity,
        record.destination_number, record.remote_station_id,
        record.encoded_params, record.page_count,
        format_duration(record.job_duration), format_duration(record.connect_duration),
        record.result_text, '', '', '', record.owner_identity, record.encoding_scheme,
    )


def format_reception_report(record, ts_format):
    return _format_line(
        record.timestamp.strftime(ts_format), 'RECV', record.comm_id, record.device_id,
        record.file_name, '', 'fax',
        record.destination_number, record.remote_station_id,
        record.encoded_params, record.page_count,
        format_duration(record.job_duration), format_duration(record.connect_duration),
        record.result_text,
        f'"{record.caller_id_name}"', f'"{record.caller_id_number}"',
        '', '', record.encoding_scheme,
    )


class XferFaxLogWriter:
    """Write CDRs to the configured xferfaxlog file."""

    def __init__(self, config, append=append_to):
        self.path = config.XFERFAXLOG
        self.ts_format = config.XFERFAXLOG_TS_FORMAT
        self._append = append

    @property
    def enabled(self):
        return bool(self.path)

    def save_transmission_report(self, record):
        """Append a SEND line. Returns False when no xferfaxlog is configured."""
        if not self.enabled:
            return False
        self._append(self.path, format_transmission_report(record, self.ts_format))
        logger.debug(f"xferfaxlog SEND {record.comm_id} -> {self.path}")
        return True

    def save_reception_report(self, record):
        """Append a RECV line. Returns False when no xferfaxlog is configured."""
        if not self.enabled:
            return False
        self._append(self.path, format_reception_report(record, self.ts_format))
        logger.debug(f"xferfaxlog RECV {record.comm_id} -> {self.path}")
        return True
