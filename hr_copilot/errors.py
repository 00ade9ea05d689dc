# errors.py


class InputError(ValueError):
    """Request rejected before the pipeline runs."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class SynthesisError(RuntimeError):
    """The generative backend failed, so there is no answer to return."""
