"""
Error taxonomy

None of these are fatal to the session: each one is caught by the controller
or the CLI and turned into a status message, a warning, or a no-op.
"""


class YomitoreError(Exception):
    """Base class for all yomitore errors"""
    pass


class TransportFailure(YomitoreError):
    """A generate/evaluate call failed (network error, timeout, empty response)"""
    pass


class UnparseableVerdict(YomitoreError):
    """The evaluator output carried no determinate overall result"""
    pass


class PersistenceFailure(YomitoreError):
    """The result history could not be loaded or saved"""
    pass


class InvalidState(YomitoreError):
    """An operation was requested while another one is still pending"""
    pass


class TerminalUnavailable(YomitoreError):
    """Standard input is not an interactive terminal"""
    pass
