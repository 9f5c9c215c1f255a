"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime, timedelta

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import Config
from models.database import get_engine, init_db
from models.fax_result import FaxResult, PageResult

START_TS = datetime(2024, 3, 5, 14, 7, 33)


@pytest.fixture
def send_result():
    """A finished three page transmission."""
    return FaxResult(
        start_ts=START_TS,
        end_ts=START_TS + timedelta(seconds=95),
        comm_id='000123',
        transfer_rate=14400,
        ecm=True,
        transferred_pages=3,
        page_results=[PageResult('MMR'), PageResult('MR'), PageResult('MR')],
        result_text='OK',
        direction='SEND',
        device_id='freeswitch',
        job_id=42,
        job_tag='invoice',
        sender='+4930999',
        destination='+4930123456',
        remote_id='REMOTE TSI',
        owner='alice',
    )


@pytest.fixture
def recv_result():
    """A finished three page reception."""
    return FaxResult(
        start_ts=START_TS,
        end_ts=START_TS + timedelta(seconds=95),
        comm_id='000124',
        transfer_rate=14400,
        ecm=True,
        transferred_pages=3,
        page_results=[PageResult('MMR')],
        result_text='OK',
        direction='RECV',
        device_id='freeswitch',
        file_name='recvq/fax000124.tif',
        destination='+4930123456',
        remote_id='REMOTE TSI',
        cid_name='Bob',
        cid_number='+4930555',
    )


@pytest.fixture
def xferfaxlog_path(tmp_path):
    return tmp_path / 'xferfaxlog'


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cdr.db'}"


@pytest.fixture
def db_config(db_url):
    return Config({'CDR_DATABASE_URL': db_url})


@pytest.fixture
def db_engine(db_config):
    """SQLite CDR store with all tables created."""
    engine = get_engine(db_config)
    init_db(engine)
    yield engine
    engine.dispose()
