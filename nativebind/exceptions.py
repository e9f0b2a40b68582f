"""
    failure kinds of the class registry

    all of them are raised synchronously to the caller of the operation,
    a registry mutation that raises has not changed anything

    unwrap returning None for a handle without a live wrapper is not an error
"""

class BindError(Exception):
    pass

class AlreadyRegistered(BindError):
    "the type already has a class descriptor in this context"
class AlreadyLinked(BindError):
    "the class descriptor already has a base"
class AlreadyBound(BindError):
    "the name is already used by another binding of the class"
class UnregisteredType(BindError, LookupError):
    "the type has no class descriptor in this context"
class InstanceNotTracked(BindError, LookupError):
    "the native instance has no live wrapper"
class ConversionError(BindError, TypeError):
    "a value can't be marshaled between native and script"
class QualifierMismatch(BindError, TypeError):
    "no binding accepts the qualifier the instance was wrapped with"
