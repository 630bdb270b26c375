import time

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

def format_timestamp(ts : float) -> str:
    # local time, second resolution
    return time.strftime(TIMESTAMP_FORMAT, time.localtime(ts))
