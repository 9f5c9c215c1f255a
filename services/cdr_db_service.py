"""
CDR Database Service - inserts CDRs into the relational xferfaxlog table.

Every write opens its own connection and session and releases both before
returning, whether the insert worked or not. Received faxes are attributed
to the account that owns the dialed number when that mapping is unambiguous.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError, NoResultFound, MultipleResultsFound

from models.database import get_engine, get_session
from models.fax_numbers import Email, EmailNumber, FaxNumber
from models.xferfaxlog import XferFaxLog
from services.errors import SinkUnavailableError, SinkWriteError
from services.field_encoder import format_duration

logger = logging.getLogger(__name__)

SINK_NAME = 'database'


def transmission_row(record):
    """Map a SEND record onto the xferfaxlog columns."""
    return XferFaxLog(
        timestamp=record.timestamp,
        entrytype='SEND',
        commid=record.comm_id,
        modem=record.device_id,
        jobid=str(record.job_id),
        jobtag=record.job_tag,
        user=record.local_identity,
        destnumber=record.destination_number,
        tsi=record.remote_station_id,
        params=record.encoded_params,
        npages=record.page_count,
        jobtime=format_duration(record.job_duration),
        conntime=format_duration(record.connect_duration),
        reason=record.result_text,
        cidname=record.caller_id_name,
        cidnumber=record.caller_id_number,
        callid='',
        owner=record.owner_identity,
        dcs=record.encoding_scheme,
    )


def reception_row(record, user):
    """Map a RECV record onto the xferfaxlog columns, user owns the dialed number."""
    return XferFaxLog(
        timestamp=record.timestamp,
        entrytype='RECV',
        commid=record.comm_id,
        modem=record.device_id,
        jobid=record.file_name,
        jobtag='',
        user=user,
        destnumber=record.destination_number,
        tsi=record.remote_station_id,
        params=record.encoded_params,
        npages=record.page_count,
        jobtime=format_duration(record.job_duration),
        conntime=format_duration(record.connect_duration),
        reason=record.result_text,
        cidname=record.caller_id_name,
        cidnumber=record.caller_id_number,
        callid='',
        owner=user,
        dcs=record.encoding_scheme,
    )


class CdrDatabaseWriter:
    """Write CDRs to the configured relational store."""

    def __init__(self, config, engine=None):
        self.config = config
        self._engine = engine

    @property
    def enabled(self):
        return self._engine is not None or self.config.database_enabled

    def save_tx_cdr(self, record):
        """Insert a SEND row. Returns False when no database is configured."""
        if not self.enabled:
            return False
        return self._insert(record, lambda db: transmission_row(record))

    def save_rx_cdr(self, record):
        """Insert a RECV row. Returns False when no database is configured."""
        if not self.enabled:
            return False
        return self._insert(
            record,
            lambda db: reception_row(record, self.lookup_user(db, record.destination_number)),
        )

    def lookup_user(self, db, destnum):
        """
        Resolve the account email owning destnum. Falls back to destnum itself
        when the number is unknown, shared, disabled or the lookup fails.
        """
        if not destnum:
            return destnum

        try:
            row = (
                db.query(Email.email)
                .join(EmailNumber, EmailNumber.email_id == Email.id)
                .join(FaxNumber, EmailNumber.number_id == FaxNumber.id)
                .filter(
                    FaxNumber.faxnum == destnum,
                    FaxNumber.enabled.is_(True),
                    EmailNumber.shared.is_(False),
                )
                .one()
            )
            return row[0]
        except NoResultFound:
            logger.warning(f"No account for fax number {destnum}, using the number as user")
        except MultipleResultsFound:
            logger.warning(f"Fax number {destnum} maps to several accounts, using the number as user")
        except SQLAlchemyError as e:
            logger.warning(f"Account lookup for {destnum} failed: {e}")
            db.rollback()
        return destnum

    def get_db_engine(self):
        if self._engine is None:
            try:
                self._engine = get_engine(self.config)
            except (SQLAlchemyError, ImportError, ValueError) as e:
                raise SinkUnavailableError(SINK_NAME, f"Cannot create DB engine: {e}") from e
        return self._engine

    # ===== HELPERS =====

    def _insert(self, record, make_row):
        engine = self.get_db_engine()
        try:
            conn = engine.connect()
        except SQLAlchemyError as e:
            raise SinkUnavailableError(SINK_NAME, f"Cannot open DB connection: {e}") from e

        db = get_session(conn)
        try:
            db.add(make_row(db))
            db.commit()
            logger.info(f"Saved {record.entrytype} CDR {record.comm_id} to database")
            return True
        except SQLAlchemyError as e:
            db.rollback()
            raise SinkWriteError(SINK_NAME, f"Cannot insert CDR {record.comm_id}: {e}") from e
        finally:
            db.close()
            conn.close()
