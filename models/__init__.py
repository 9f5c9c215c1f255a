from models.database import Base, get_engine, get_session, init_db
from models.xferfaxlog import XferFaxLog
from models.fax_numbers import FaxNumber, Email, EmailNumber
from models.fax_result import FaxResult, PageResult
from models.cdr import CallDetailRecord, Direction

__all__ = [
    'Base', 'get_engine', 'get_session', 'init_db',
    'XferFaxLog', 'FaxNumber', 'Email', 'EmailNumber',
    'FaxResult', 'PageResult', 'CallDetailRecord', 'Direction',
]
