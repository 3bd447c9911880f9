'''
Errors raised by the eigenvalue solvers.

Fatal conditions carry a `LanczosErrorMsg` code. Outcomes that still produce a
usable spectrum (breakdown, iteration cap reached) are reported through the
result, not raised.

File:       sparse_lanczos/algebra/eigen/errors.py
'''

from enum import Enum, unique
from typing import Optional

# -----------------------------------------------------------------------------
#! Error codes
# -----------------------------------------------------------------------------

@unique
class LanczosErrorMsg(Enum):
    '''
    Enumeration class for eigensolver error codes.
    '''
    DIMENSION_MISMATCH  = 201
    RESOURCE_EXHAUSTED  = 202
    OPERATOR_FAILED     = 203
    NOT_HERMITIAN       = 204
    ENGINE_FAILED       = 205
    ENGINE_RELEASED     = 206

    def __str__(self):
        return self.name.replace('_', ' ').title()

    def __repr__(self):
        return f"<{self.__class__.__name__}.{self.name}: '{str(self)}'>"

# -----------------------------------------------------------------------------
#! Exceptions
# -----------------------------------------------------------------------------

class LanczosError(Exception):
    '''
    Base class for exceptions raised by the eigensolvers.
    '''
    def __init__(self, code: LanczosErrorMsg, message: Optional[str] = None):
        self.code       = code
        self.message    = message if message else str(code)
        super().__init__(self.message)

    def __str__(self):
        return f"[LanczosError {self.code.name} ({self.code.value})]: {self.message}"

    def __repr__(self):
        return self.__str__()

class DimensionMismatchError(LanczosError, ValueError):
    ''' Operator dimension disagrees with the vector length. '''
    def __init__(self, message: Optional[str] = None):
        super().__init__(LanczosErrorMsg.DIMENSION_MISMATCH, message)

class ResourceExhaustedError(LanczosError, MemoryError):
    ''' Allocation failed, or a buffer would exceed the configured memory limit. '''
    def __init__(self, message: Optional[str] = None):
        super().__init__(LanczosErrorMsg.RESOURCE_EXHAUSTED, message)

class OperatorError(LanczosError, RuntimeError):
    ''' The matvec or a vector operation failed; the run's partial state is undefined. '''
    def __init__(self, message: Optional[str] = None):
        super().__init__(LanczosErrorMsg.OPERATOR_FAILED, message)

class NotHermitianError(LanczosError, ValueError):
    ''' A Rayleigh quotient <v, Hv> came out with a significant imaginary part. '''
    def __init__(self, message: Optional[str] = None):
        super().__init__(LanczosErrorMsg.NOT_HERMITIAN, message)

class EngineStateError(LanczosError, RuntimeError):
    ''' The engine was used after a failure or after release. '''
    pass

# -----------------------------------------------------------------------------
#! EOF
# -----------------------------------------------------------------------------
