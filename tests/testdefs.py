import inspect
import functools
import textwrap
from nativebind.utils.code import format_exception_only
from nativebind import Context

def func_gen(f):
    def wrap(*args, **kwargs):
        def wrapped():
            return f(*args, **kwargs)
        return wrapped
    return wrap
def code_arg(f):
    format = lambda code: textwrap.dedent(code).strip().replace("\t", " " * 4)
    @functools.wraps(f)
    def wrapped(code, *args, **kwargs):
        return f(format(code), *args, **kwargs)
    return wrapped

@func_gen
@code_arg
def evals(code, result, setup=None):
    context = Context()
    if setup:
        setup(context)
    obj = context.run(code)
    assert obj == result, "Expected {}, got {}".format(repr(result), repr(obj))
@func_gen
@code_arg
def fails(code, error=None, setup=None):
    context = Context()
    if setup:
        setup(context)
    try:
        context.run(code)
    except Exception as exc:
        if not error:
            return
        if type(exc).__name__ == error:
            return
        msg = format_exception_only(exc).rstrip()
        if msg == error:
            return
        raise Exception("Expected {} to raise\n{}\ngot\n{}".format(repr(code), textwrap.indent(error, " " * 4), textwrap.indent(msg, " " * 4)))
    raise Exception("Expected {} to raise{}".format(repr(code), "\n{}".format(textwrap.indent(error, " " * 4)) if error else " an exception"))

def name_tests(*args, **kwargs):
    frame, filename, lineno, function, code_context, index = inspect.stack(0)[1]
    module = frame.f_globals
    for i, test in enumerate(args):
        module["test_{}".format(str(i + 1))] = test
    for kw, test in kwargs.items():
        module["test_{}".format(kw)] = test
