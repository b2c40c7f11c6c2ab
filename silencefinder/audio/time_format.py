from decimal import Decimal, ROUND_FLOOR
from typing import Union

_TWO_PLACES = Decimal("0.01")


def truncate_2dp(value: Union[str, float]) -> float:
    """
    Floor a timestamp to two decimals, matching ffmpeg's reporting granularity.
    Works on the decimal text so 12.34 stays 12.34 instead of drifting to 12.33.
    """
    quantized = Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_FLOOR)
    return float(quantized)


def format_hms(seconds: float) -> str:
    """
    Render seconds as H:MM:SS. Hours are unbounded and the sub-second part is dropped.
    Negative offsets keep their sign: -0.5 -> "-0:00:00".
    """
    sign = "-" if seconds < 0 else ""
    whole_seconds = int(abs(seconds))
    hours, remainder = divmod(whole_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{sign}{hours}:{minutes:02d}:{secs:02d}"
