"""Exception hierarchy for procsnitch."""


class SnitchError(Exception):
    """Base for all procsnitch errors."""


class ConfigError(SnitchError):
    """Configuration is missing, malformed or names an unknown sampler."""


class ProcessStartError(SnitchError):
    """The supervised process could not be started."""


class ProcessKillError(SnitchError):
    """The termination signal could not be delivered to the supervised process."""


class ProcessNotFoundError(SnitchError):
    """No running process matches the requested name or pid."""


class SamplerError(SnitchError):
    """A sampler failed in a way that ends the session."""


class SamplerToolError(SamplerError):
    """The external inspection tool could not be executed."""


class MetricParseError(SamplerError):
    """A matched report line holds a value that is not a number."""


class SamplerStateError(SamplerError):
    """Sampler used outside its Idle -> Active -> Stopped lifecycle."""


class SeriesFrozenError(SnitchError):
    """Append attempted on a series store that has been frozen."""


class ChannelClosedError(SnitchError):
    """Put or close on a delivery channel that is already closed."""
