import sys
import functools

def skip_exc_info(exc_info=None, depth=0):
    if not exc_info:
        exc_info = sys.exc_info()
    exc_type, exc, tb = exc_info
    for i in range(depth):
        if tb.tb_next:
            tb = tb.tb_next
        else:
            break
    return exc_type, exc, tb

class InlineException(Exception): pass
def inline_exc(exc_type):
    def wrap(f):
        @functools.wraps(f)
        def wrapped(*args, inline_exc=False, **kwargs):
            if not inline_exc:
                try:
                    return f(*args, **kwargs)
                except InlineException as exc:
                    raise exc_type(*exc.args).with_traceback(exc.__traceback__) from None
                # REASON:
                # - with_traceback makes it point to the source instead of here
                # - from None hides the reraise
            else:
                return f(*args, **kwargs)
        return wrapped
    return wrap

def format_exception_only(exc):
    """
        error message without the traceback or the special SyntaxError treatment
        works exactly like traceback.format_exception(type(exc), exc, None)
    """
    exc_type = type(exc)

    stype = exc_type.__qualname__
    smod = exc_type.__module__
    if smod not in ("__main__", "builtins"):
        stype = smod + '.' + stype
    try:
        _str = str(exc)
    except Exception:
        _str = "<unprintable {} object>".format(exc_type.__name__)

    if _str == "None" or not _str:
        line = "{}\n".format(stype)
    else:
        line = "{}: {}\n".format(stype, _str)
    return line
