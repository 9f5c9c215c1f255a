"""Encodings used by the legacy HylaFAX xferfaxlog record format."""


def encode_params(baud_rate, ecm):
    """
    Encode the baud rate and ECM use into the status word used in
    HylaFAX's xferfaxlog. Only the rate tier and ECM are encoded.
    """
    if baud_rate > 12000:
        br = 5
    elif baud_rate > 9600:
        br = 4
    elif baud_rate > 7200:
        br = 3
    elif baud_rate > 4800:
        br = 2
    elif baud_rate > 2400:
        br = 1
    else:
        br = 0

    ec = 1 if ecm else 0

    return (br << 3) | (ec << 16)


def format_duration(duration):
    """Format a timedelta as HH:MM:SS, truncated to whole seconds."""
    s = max(int(duration.total_seconds()), 0)

    hours = s // (60 * 60)
    minutes = (s // 60) - (60 * hours)
    seconds = s % 60

    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
