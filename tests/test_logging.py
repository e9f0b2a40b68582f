from nativebind import Context
import io

class Item:
    pass

def test_trace_calls():
    context = Context()
    buf = io.StringIO()
    with context.logging(file=buf):
        context.run("1 + 2")
    lines = buf.getvalue().splitlines()
    assert lines[0] == "run('1 + 2')"

def test_trace_descriptor():
    context = Context()
    item = context.classes.register(Item)
    buf = io.StringIO()
    with context.logging(file=buf):
        item.create_wrapped()
    lines = buf.getvalue().splitlines()
    assert lines[0] == "create_wrapped()"
    assert any(line.startswith(".   persistent(") for line in lines[1:])

def test_trace_off():
    context = Context()
    buf = io.StringIO()
    with context.logging(file=buf):
        pass
    context.run("1")
    assert buf.getvalue() == ""
    assert "__getattribute__" not in type(context).__dict__

def test_long_args_shortened():
    context = Context()
    buf = io.StringIO()
    with context.logging(file=buf):
        context.eval("'" + "a" * 200 + "'")
    line = buf.getvalue().splitlines()[0]
    assert line.startswith("eval(str<")
    assert len(line) < 80
