"""
Pipeline error taxonomy
"""


class ReviewStudioError(Exception):
    """Base class for pipeline failures"""


class ConfigurationError(ReviewStudioError):
    """A mandatory service credential is missing"""


class UpstreamParseError(ReviewStudioError):
    """The generation service reply could not be parsed or validated"""


class UpstreamFetchError(ReviewStudioError):
    """A page or image service fetch failed; always recovered locally"""
