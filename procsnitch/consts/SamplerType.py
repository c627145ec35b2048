from enum import Enum


class SamplerType(Enum):
    TOP = "TopSampler"
