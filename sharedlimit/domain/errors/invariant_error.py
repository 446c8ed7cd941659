"""Invariant violation raised by the blocking wait.

Every algorithm promises a real future ``reset`` whenever it denies a request.
A denial with ``reset == 0`` means that promise was broken; this is a
programming fault, so it is raised instead of travelling as a Failure.
"""


class RatelimitInvariantError(RuntimeError):
    """An algorithm broke its response contract."""
