"""Error types raised or returned at the start of a run.

Only two things can go wrong with a transmission line run, and both are
detected before the first step: the parameter set itself is out of range
(:class:`InvalidParameters`), or the line impedance is zero
(:class:`InvalidLineImpedance`). Once a run has started, stepping never raises.
"""


class LineParameterError(ValueError):
    """Base class for parameter errors of a transmission line run."""


class InvalidParameters(LineParameterError):
    """One or more fields of a :class:`~tlfdtd.parameters.ParameterSet` are out of range.

    Attributes:
        fields: Names of the offending fields, in declaration order.
    """

    def __init__(self, fields):
        self.fields = tuple(fields)
        super().__init__(f"Invalid line parameters: {', '.join(self.fields)}")


class InvalidLineImpedance(LineParameterError):
    """The characteristic impedance is zero, so the line coefficients are undefined."""

    def __init__(self, message: str = "Z0 must be more than 0 Ohm."):
        super().__init__(message)
