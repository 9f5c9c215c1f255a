"""Build a CallDetailRecord from the session engine's FaxResult."""

from models.cdr import CallDetailRecord, Direction


def build_record(result):
    """Create the CDR for a finished session. Pure, no I/O."""
    if result.start_ts is None or result.end_ts is None:
        raise ValueError("FaxResult needs both start_ts and end_ts")
    if (result.start_ts.tzinfo is None) != (result.end_ts.tzinfo is None):
        raise ValueError("start_ts and end_ts must both have a UTC offset or neither")

    # Connect time is not measured separately, both spans are the job's wall clock
    duration = result.end_ts - result.start_ts

    dcs = ''
    if result.page_results:
        dcs = result.page_results[0].encoding_name

    return CallDetailRecord(
        timestamp=result.start_ts,
        direction=Direction(result.direction),
        comm_id=result.comm_id,
        device_id=result.device_id,
        job_id=result.job_id,
        job_tag=result.job_tag,
        file_name=result.file_name,
        local_identity=result.sender,
        destination_number=result.destination,
        remote_station_id=result.remote_id,
        transfer_rate_baud=result.transfer_rate,
        ecm_enabled=result.ecm,
        page_count=result.transferred_pages,
        job_duration=duration,
        connect_duration=duration,
        result_text=result.result_text,
        caller_id_name=result.cid_name,
        caller_id_number=result.cid_number,
        owner_identity=result.owner,
        encoding_scheme=dcs,
    )
