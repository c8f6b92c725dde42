class RetrievalFailure(RuntimeError):
    """The record store could not answer a select."""


class IntentParseError(ValueError):
    """The semantic parser produced no usable intent."""
