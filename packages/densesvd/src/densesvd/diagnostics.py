"""
Progress reporting for the numerical core.

Purely observational: nothing here feeds back into the algorithm.
    verbose 0 → silent
    verbose 1 → phase markers
    verbose 2 → phase markers + one dot per outer iteration
"""

from densesvd.config import SVDConfig


class Progress:
    """Writes phase markers and progress dots to the diagnostic stream."""

    def __init__(self, config: SVDConfig):
        self.verbose = config.verbose
        self.stream = config.diagnostic_stream
        self._open = False

    def phase(self, name: str):
        if not self.verbose:
            return
        prefix = '\n' if self._open else ''
        self._write(f"{prefix}  svd: {name}:")
        self._open = True

    def tick(self):
        if self.verbose > 1:
            self._write('.')

    def done(self):
        if self.verbose:
            self._write('\n')
        self._open = False

    def _write(self, text: str):
        self.stream.write(text)
        self.stream.flush()
