"""
FaxResult - outcome of one fax session as reported by the session engine.

The session engine posts this as JSON once a transmission or reception has
finished. Only the fields needed for the CDR are modelled here.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class PageResult:
    encoding_name: str = ''


@dataclass
class FaxResult:
    start_ts: Optional[datetime]
    end_ts: Optional[datetime]
    comm_id: str = ''
    transfer_rate: int = 0
    ecm: bool = False
    transferred_pages: int = 0
    page_results: List[PageResult] = field(default_factory=list)
    result_text: str = ''
    direction: str = 'SEND'     # SEND / RECV

    # Identity fields, which of them are set depends on the direction
    device_id: str = ''
    job_id: int = 0
    job_tag: str = ''
    file_name: str = ''
    sender: str = ''
    destination: str = ''
    remote_id: str = ''
    cid_name: str = ''
    cid_number: str = ''
    owner: str = ''

    @classmethod
    def from_dict(cls, data, direction=None):
        """Parse the JSON body posted by the session engine."""
        if not data.get('start_ts') or not data.get('end_ts'):
            raise ValueError("start_ts and end_ts are required")

        direction = direction or str(data.get('direction', 'SEND')).upper()
        if direction not in ('SEND', 'RECV'):
            raise ValueError(f"Unknown direction: {direction}")

        pages = [
            PageResult(encoding_name=p.get('encoding_name', '') if isinstance(p, dict) else str(p))
            for p in data.get('page_results') or []
        ]

        start_ts = datetime.fromisoformat(data['start_ts'])
        end_ts = datetime.fromisoformat(data['end_ts'])
        if (start_ts.tzinfo is None) != (end_ts.tzinfo is None):
            raise ValueError("start_ts and end_ts must both have a UTC offset or neither")

        return cls(
            start_ts=start_ts,
            end_ts=end_ts,
            comm_id=str(data.get('comm_id', '')),
            transfer_rate=int(data.get('transfer_rate', 0)),
            ecm=_as_bool(data.get('ecm', False)),
            transferred_pages=int(data.get('transferred_pages', 0)),
            page_results=pages,
            result_text=data.get('result_text', ''),
            direction=direction,
            device_id=data.get('device_id', ''),
            job_id=int(data.get('job_id') or 0),
            job_tag=data.get('job_tag', ''),
            file_name=data.get('file_name', ''),
            sender=data.get('sender', ''),
            destination=data.get('destination', ''),
            remote_id=data.get('remote_id', ''),
            cid_name=data.get('cid_name', ''),
            cid_number=data.get('cid_number', ''),
            owner=data.get('owner', ''),
        )


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)
