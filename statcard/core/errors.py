class StatCardError(Exception):
    """Base for every failure that aborts a card request."""


class DataSourceError(StatCardError):
    """GitHub could not be reached or answered with an unexpected status."""


class NotFoundError(DataSourceError):
    pass


class RateLimitError(NotFoundError):
    # collapsed into "not found" at the HTTP boundary
    pass


class InvalidInputError(StatCardError):
    pass


class RenderError(StatCardError):
    pass
