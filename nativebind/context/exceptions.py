from nativebind import utils
from nativebind import exceptions

def add_exceptions(context):
    class Break(Exception):
        pass
    class Continue(Exception):
        pass

    context.exc = utils.Object()
    for name, exception in utils.redict(locals(), "context".split()).items():
        context.exc[name] = exception
    for name in """
        BindError AlreadyRegistered AlreadyLinked AlreadyBound
        UnregisteredType InstanceNotTracked ConversionError QualifierMismatch
    """.split():
        context.exc[name] = getattr(exceptions, name)
