"""
CDR Service - records a finished fax session in every configured sink.

The xferfaxlog file and the database are written independently. A failure
in one of them is logged and reported back but never stops the other one,
and never reaches the fax session itself.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from models.cdr import CallDetailRecord, Direction
from services.cdr_builder import build_record
from services.cdr_db_service import CdrDatabaseWriter, SINK_NAME as DATABASE_SINK
from services.errors import CdrPersistenceError
from services.xferfaxlog_service import XferFaxLogWriter, SINK_NAME as XFERFAXLOG_SINK
from config import get_config

logger = logging.getLogger(__name__)


@dataclass
class CdrOutcome:
    record: Optional[CallDetailRecord]
    file_written: bool = False
    db_written: bool = False
    errors: List[CdrPersistenceError] = field(default_factory=list)

    @property
    def ok(self):
        return not self.errors

    def sink_status(self, sink, written):
        if any(e.sink == sink for e in self.errors):
            return 'error'
        return 'written' if written else 'disabled'

    def to_dict(self):
        return {
            'commid': self.record.comm_id if self.record else None,
            'entrytype': self.record.entrytype if self.record else None,
            'xferfaxlog': self.sink_status(XFERFAXLOG_SINK, self.file_written),
            'database': self.sink_status(DATABASE_SINK, self.db_written),
            'errors': [str(e) for e in self.errors],
        }


class CdrService:
    """Build the CDR for a finished session and hand it to each sink once."""

    def __init__(self, config=None, file_writer=None, db_writer=None):
        self.config = config or get_config()
        self.file_writer = file_writer or XferFaxLogWriter(self.config)
        self.db_writer = db_writer or CdrDatabaseWriter(self.config)

    def record_transmission(self, result):
        """Persist the CDR of a sent fax."""
        record = build_record(result)
        if record.direction is not Direction.SEND:
            raise ValueError(f"Not a transmission: {record.entrytype}")
        logger.info(f"FAX SENT: {record.comm_id} to {record.destination_number}")
        return self._persist(
            record,
            self.file_writer.save_transmission_report,
            self.db_writer.save_tx_cdr,
        )

    def record_reception(self, result):
        """Persist the CDR of a received fax."""
        record = build_record(result)
        if record.direction is not Direction.RECEIVE:
            raise ValueError(f"Not a reception: {record.entrytype}")
        logger.info(f"FAX RECEIVED: {record.comm_id} on {record.destination_number}")
        return self._persist(
            record,
            self.file_writer.save_reception_report,
            self.db_writer.save_rx_cdr,
        )

    def record(self, result):
        """Dispatch on the direction reported by the session engine."""
        if result.direction == Direction.RECEIVE.value:
            return self.record_reception(result)
        return self.record_transmission(result)

    # ===== HELPERS =====

    def _persist(self, record, save_file, save_db):
        outcome = CdrOutcome(record=record)
        outcome.file_written = self._attempt(outcome, XFERFAXLOG_SINK, save_file)
        outcome.db_written = self._attempt(outcome, DATABASE_SINK, save_db)
        return outcome

    def _attempt(self, outcome, sink, save):
        """Run one sink, recording its failure so the next sink still runs."""
        record = outcome.record
        try:
            return save(record)
        except CdrPersistenceError as e:
            logger.error(f"Error saving CDR {record.comm_id} to {sink}: {e}")
            outcome.errors.append(e)
        except Exception as e:
            logger.error(f"Unexpected error saving CDR {record.comm_id} to {sink}: {e}", exc_info=True)
            outcome.errors.append(CdrPersistenceError(sink, f"{type(e).__name__}: {e}"))
        return False


# Lazy singleton
_cdr_instance = None


def get_cdr_service():
    global _cdr_instance
    if _cdr_instance is None:
        _cdr_instance = CdrService()
    return _cdr_instance


def reset_cdr_service():
    """Drop the cached service so the next call re-reads the environment."""
    global _cdr_instance
    _cdr_instance = None
