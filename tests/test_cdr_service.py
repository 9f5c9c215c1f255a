"""Tests for recording finished sessions in both sinks."""

from unittest.mock import MagicMock

import pytest

from config import Config
from models.cdr import Direction
from services.cdr_service import CdrService, get_cdr_service, reset_cdr_service
from services.errors import SinkUnavailableError, SinkWriteError


def _service(file_writer=None, db_writer=None):
    return CdrService(
        Config({}),
        file_writer=file_writer or MagicMock(),
        db_writer=db_writer or MagicMock(),
    )


class TestCdrService:
    """Test CdrService."""

    def test_transmission_uses_send_writers(self, send_result):
        file_writer = MagicMock()
        db_writer = MagicMock()
        file_writer.save_transmission_report.return_value = True
        db_writer.save_tx_cdr.return_value = True

        outcome = _service(file_writer, db_writer).record_transmission(send_result)

        assert outcome.ok
        assert outcome.file_written and outcome.db_written
        assert outcome.record.direction is Direction.SEND
        file_writer.save_transmission_report.assert_called_once_with(outcome.record)
        db_writer.save_tx_cdr.assert_called_once_with(outcome.record)
        file_writer.save_reception_report.assert_not_called()
        db_writer.save_rx_cdr.assert_not_called()

    def test_reception_uses_recv_writers(self, recv_result):
        file_writer = MagicMock()
        db_writer = MagicMock()

        outcome = _service(file_writer, db_writer).record_reception(recv_result)

        file_writer.save_reception_report.assert_called_once_with(outcome.record)
        db_writer.save_rx_cdr.assert_called_once_with(outcome.record)

    def test_same_record_goes_to_both_sinks(self, send_result):
        file_writer = MagicMock()
        db_writer = MagicMock()

        _service(file_writer, db_writer).record_transmission(send_result)

        file_record = file_writer.save_transmission_report.call_args[0][0]
        db_record = db_writer.save_tx_cdr.call_args[0][0]
        assert file_record is db_record

    def test_file_failure_still_writes_database(self, send_result):
        file_writer = MagicMock()
        db_writer = MagicMock()
        file_writer.save_transmission_report.side_effect = SinkWriteError('xferfaxlog', 'disk full')
        db_writer.save_tx_cdr.return_value = True

        outcome = _service(file_writer, db_writer).record_transmission(send_result)

        assert not outcome.ok
        assert outcome.db_written is True
        assert outcome.file_written is False
        assert len(outcome.errors) == 1
        assert outcome.to_dict()['xferfaxlog'] == 'error'
        assert outcome.to_dict()['database'] == 'written'

    def test_database_failure_does_not_affect_file(self, recv_result):
        file_writer = MagicMock()
        db_writer = MagicMock()
        file_writer.save_reception_report.return_value = True
        db_writer.save_rx_cdr.side_effect = SinkUnavailableError('database', 'refused')

        outcome = _service(file_writer, db_writer).record_reception(recv_result)

        assert outcome.file_written is True
        assert [e.sink for e in outcome.errors] == ['database']
        assert outcome.to_dict()['database'] == 'error'

    def test_unexpected_file_error_still_writes_database(self, send_result):
        file_writer = MagicMock()
        db_writer = MagicMock()
        file_writer.save_transmission_report.side_effect = RuntimeError('boom')
        db_writer.save_tx_cdr.return_value = True

        outcome = _service(file_writer, db_writer).record_transmission(send_result)

        db_writer.save_tx_cdr.assert_called_once_with(outcome.record)
        assert outcome.db_written is True
        assert [e.sink for e in outcome.errors] == ['xferfaxlog']
        assert 'RuntimeError' in str(outcome.errors[0])

    def test_unexpected_database_error_is_contained(self, recv_result):
        db_writer = MagicMock()
        db_writer.save_rx_cdr.side_effect = UnicodeEncodeError('utf-8', '\ud800', 0, 1, 'surrogates not allowed')

        outcome = _service(db_writer=db_writer).record_reception(recv_result)

        assert outcome.to_dict()['database'] == 'error'

    def test_unencodable_text_still_reaches_database(self, xferfaxlog_path, send_result):
        send_result.result_text = 'bad \ud800 text'
        db_writer = MagicMock()
        db_writer.save_tx_cdr.return_value = True
        service = CdrService(
            Config({'XFERFAXLOG': str(xferfaxlog_path)}),
            db_writer=db_writer,
        )

        outcome = service.record_transmission(send_result)

        assert outcome.to_dict()['xferfaxlog'] == 'error'
        assert isinstance(outcome.errors[0], SinkWriteError)
        db_writer.save_tx_cdr.assert_called_once_with(outcome.record)
        assert outcome.db_written is True

    def test_bad_mysql_port_is_reported(self, xferfaxlog_path, send_result):
        service = CdrService(Config({
            'XFERFAXLOG': str(xferfaxlog_path),
            'MYSQL_HOST': 'db',
            'MYSQL_PORT': 'abc',
        }))

        outcome = service.record_transmission(send_result)

        assert outcome.file_written is True
        assert isinstance(outcome.errors[0], SinkUnavailableError)
        assert outcome.to_dict()['database'] == 'error'

    def test_disabled_sinks_are_not_errors(self, send_result):
        file_writer = MagicMock()
        db_writer = MagicMock()
        file_writer.save_transmission_report.return_value = False
        db_writer.save_tx_cdr.return_value = False

        outcome = _service(file_writer, db_writer).record_transmission(send_result)

        assert outcome.ok
        assert outcome.to_dict()['xferfaxlog'] == 'disabled'
        assert outcome.to_dict()['database'] == 'disabled'

    def test_record_dispatches_on_direction(self, send_result, recv_result):
        file_writer = MagicMock()
        service = _service(file_writer)

        service.record(send_result)
        service.record(recv_result)

        file_writer.save_transmission_report.assert_called_once()
        file_writer.save_reception_report.assert_called_once()

    def test_direction_mismatch(self, recv_result):
        with pytest.raises(ValueError):
            _service().record_transmission(recv_result)

    def test_end_to_end_with_real_sinks(self, tmp_path, db_url, db_engine, send_result):
        log_path = tmp_path / 'xferfaxlog'
        service = CdrService(Config({'XFERFAXLOG': str(log_path), 'CDR_DATABASE_URL': db_url}))

        outcome = service.record_transmission(send_result)

        assert outcome.ok
        assert outcome.file_written and outcome.db_written
        assert log_path.read_text(encoding='utf-8').count('\tSEND\t000123\t') == 1


class TestSingleton:
    """Test the lazily created service."""

    def setup_method(self):
        reset_cdr_service()

    def teardown_method(self):
        reset_cdr_service()

    def test_get_cdr_service_is_cached(self):
        assert get_cdr_service() is get_cdr_service()

    def test_reset(self):
        first = get_cdr_service()
        reset_cdr_service()
        assert get_cdr_service() is not first
