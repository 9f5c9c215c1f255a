"""XferFaxLog model - one row per completed fax transmission or reception."""

from sqlalchemy import Column, Integer, String, DateTime, Text
from models.database import Base


class XferFaxLog(Base):
    __tablename__ = "xferfaxlog"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    entrytype = Column(String(4), nullable=False)
    commid = Column(String(32), nullable=False, default='')
    modem = Column(String(64), nullable=False, default='')
    # Holds the job id for SEND rows and the received file for RECV rows
    jobid = Column(String(255), nullable=False, default='')
    jobtag = Column(String(255), nullable=False, default='')
    user = Column(String(255), nullable=False, default='')
    destnumber = Column(String(64), nullable=False, default='', index=True)
    tsi = Column(String(64), nullable=False, default='')
    params = Column(Integer, nullable=False, default=0)
    npages = Column(Integer, nullable=False, default=0)
    jobtime = Column(String(16), nullable=False, default='00:00:00')
    conntime = Column(String(16), nullable=False, default='00:00:00')
    reason = Column(Text, nullable=False, default='')
    cidname = Column(String(255), nullable=False, default='')
    cidnumber = Column(String(64), nullable=False, default='')
    callid = Column(String(255), nullable=False, default='')
    owner = Column(String(255), nullable=False, default='')
    dcs = Column(String(64), nullable=False, default='')

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'entrytype': self.entrytype,
            'commid': self.commid,
            'modem': self.modem,
            'jobid': self.jobid,
            'jobtag': self.jobtag,
            'user': self.user,
            'destnumber': self.destnumber,
            'tsi': self.tsi,
            'params': self.params,
            'npages': self.npages,
            'jobtime': self.jobtime,
            'conntime': self.conntime,
            'reason': self.reason,
            'cidname': self.cidname,
            'cidnumber': self.cidnumber,
            'callid': self.callid,
            'owner': self.owner,
            'dcs': self.dcs,
        }
