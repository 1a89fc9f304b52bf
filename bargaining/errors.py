"""Exception hierarchy for the bargaining simulator."""


class BargainingError(Exception):
    """Base class for all simulator errors."""


class SamplingError(BargainingError):
    """The random sampler failed to produce a variate."""


class UnsupportedDecisionError(BargainingError):
    """A decision was attempted that the session's variant does not offer."""


class TranscriptFormatError(BargainingError):
    """A transcript export could not be parsed."""
