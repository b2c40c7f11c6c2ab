from dataclasses import dataclass, asdict
from typing import Any, Dict, List


@dataclass(frozen=True)
class SilenceRecord:
    """One detected silence interval of a single file."""
    file_name: str
    start_sec: float
    end_sec: float
    duration_sec: float
    start_hms: str
    end_hms: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def as_row(self) -> List[Any]:
        """Values in CSV column order: FileName, Start, End, Duration, StartHms, EndHms."""
        return [self.file_name, self.start_sec, self.end_sec, self.duration_sec, self.start_hms, self.end_hms]
