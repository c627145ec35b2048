import logging
from typing import Optional

from procsnitch.consts.SamplerType import SamplerType
from procsnitch.exceptions import ConfigError
from procsnitch.service.sampler.sampler import Sampler
from procsnitch.service.sampler.top_sampler import TopSampler


def build_sampler(sampler_type: SamplerType, logger: Optional[logging.Logger] = None) -> Sampler:
    """Fresh sampler for one session; samplers are not reusable across sessions."""
    if sampler_type == SamplerType.TOP:
        return TopSampler(logger=logger)

    raise ConfigError(f"Unsupported sampler type: {sampler_type}")
