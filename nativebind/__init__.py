from .context import Context
from .console import Console
from .module import Module
from .classes import RAW, SHARED, RawTraits, SharedTraits, Shared, Qualifier, CallInfo, callback
from .exceptions import BindError, AlreadyRegistered, AlreadyLinked, AlreadyBound, UnregisteredType, \
    InstanceNotTracked, ConversionError, QualifierMismatch
import sys

__version__ = "0.1"

def main():
    console = Console()
    print("Nativebind {}".format(__version__), file=sys.stderr, flush=True)
    console.interact()
    return 0
