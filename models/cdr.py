"""CallDetailRecord - immutable snapshot of one completed fax session."""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta

from services.field_encoder import encode_params


class Direction(enum.Enum):
    SEND = 'SEND'
    RECEIVE = 'RECV'


@dataclass(frozen=True)
class CallDetailRecord:
    timestamp: datetime
    direction: Direction
    comm_id: str = ''
    device_id: str = ''
    job_id: int = 0
    job_tag: str = ''
    file_name: str = ''
    local_identity: str = ''
    destination_number: str = ''
    remote_station_id: str = ''
    transfer_rate_baud: int = 0
    ecm_enabled: bool = False
    page_count: int = 0
    job_duration: timedelta = timedelta(0)
    connect_duration: timedelta = timedelta(0)
    result_text: str = ''
    caller_id_name: str = ''
    caller_id_number: str = ''
    owner_identity: str = ''
    encoding_scheme: str = ''

    @property
    def encoded_params(self):
        """HylaFAX status word for the negotiated rate and ECM use."""
        return encode_params(self.transfer_rate_baud, self.ecm_enabled)

    @property
    def entrytype(self):
        return self.direction.value
