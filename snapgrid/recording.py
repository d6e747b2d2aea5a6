''' recording.py
    ------------
    Hooks that let an algorithmic-differentiation layer see the inputs and
    outputs of a geometric computation (a "preaccumulation" bracket).

    The kernel only calls begin / declare_inputs / declare_outputs / end.
    What a recorder does with them is its own business.
'''
import numpy as np
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field


class Recorder(ABC):
    ''' Abstract Base Class for differentiation recorders. '''

    @abstractmethod
    def begin(self):
        pass

    @abstractmethod
    def declare_inputs(self, *arrays):
        pass

    @abstractmethod
    def declare_outputs(self, *arrays):
        pass

    @abstractmethod
    def end(self):
        pass


class NullRecorder(Recorder):
    ''' Does nothing. Used by solvers that do not need gradients. '''

    def begin(self):
        pass

    def declare_inputs(self, *arrays):
        pass

    def declare_outputs(self, *arrays):
        pass

    def end(self):
        pass


@dataclass
class TapeEntry:
    ''' One bracketed computation: copies of what went in and what came out. '''
    inputs: list = field(default_factory=list)
    outputs: list = field(default_factory=list)
    closed: bool = False


class TapeRecorder(Recorder):
    ''' Keeps a snapshot of every bracketed computation.

    Arrays are copied at declaration time, so later mutation of the element
    (e.g. a centroid recomputed after mesh deformation) does not rewrite
    history.
    '''

    def __init__(self):
        self.entries = []
        self._active = None

    @property
    def active(self):
        return self._active is not None

    def begin(self):
        if self._active is not None:
            raise RuntimeError("TapeRecorder.begin() called inside an open bracket.")
        self._active = TapeEntry()

    def declare_inputs(self, *arrays):
        self._require_active()
        self._active.inputs.extend(np.array(a, dtype=np.float64, copy=True) for a in arrays)

    def declare_outputs(self, *arrays):
        self._require_active()
        self._active.outputs.extend(np.array(a, dtype=np.float64, copy=True) for a in arrays)

    def end(self):
        self._require_active()
        self._active.closed = True
        self.entries.append(self._active)
        self._active = None

    def _require_active(self):
        if self._active is None:
            raise RuntimeError("No open recording bracket; call begin() first.")

    def __len__(self):
        return len(self.entries)


NULL_RECORDER = NullRecorder()


@contextmanager
def preaccumulation(recorder=None):
    ''' Brackets a computation with begin()/end().

    end() runs even when the body raises, so a failed computation never
    leaves the recorder with an open bracket.
    '''
    recorder = NULL_RECORDER if recorder is None else recorder
    recorder.begin()
    try:
        yield recorder
    finally:
        recorder.end()
