"""Exception types shared by the estimate engine and the web layer."""


class EstimatorError(Exception):
    """Base class for every error raised by the estimator."""


class NotFoundError(EstimatorError, KeyError):
    """A catalog lookup did not resolve."""

    def __str__(self):
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ''


class InvalidSelectionError(EstimatorError, ValueError):
    """The industry / project type pairing cannot be priced."""


class DegenerateInputError(EstimatorError):
    """Profitability inputs leave no room for labor cost.

    Never raised out of the solver: the message is attached to the
    result as a warning and a fallback price is used.
    """
