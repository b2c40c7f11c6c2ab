from enum import Enum


class RunMode(str, Enum):
    SERIAL = "serial"
    PARALLEL = "parallel"
