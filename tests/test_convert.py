from nativebind import Context, SHARED, Shared
from nativebind.exceptions import ConversionError
import pytest

class Vec:
    def __init__(self, x=0, y=0):
        self.x, self.y = x, y

class Color:
    def __init__(self, name):
        self.name = name

@pytest.fixture
def context():
    return Context()

@pytest.mark.parametrize("value, type, result", [
    (1, int, 1),
    (2.0, int, 2),
    (1, float, 1.0),
    (True, bool, True),
    ("a", str, "a"),
    ([1, 2], tuple, (1, 2)),
    (None, None, None),
    ([1, "a"], None, [1, "a"]),
])
def test_from_script(context, value, type, result):
    converted = context.from_script(value, type)
    assert converted == result
    assert builtin_type(converted) is builtin_type(result)

@pytest.mark.parametrize("value, type", [
    (True, int),
    (1.5, int),
    ("1", int),
    (1, str),
    (1, bool),
    (None, float),
    (1, list),
])
def test_from_script_mismatch(context, value, type):
    with pytest.raises(ConversionError):
        context.from_script(value, type)

def test_class_arguments(context):
    vec = context.classes.register(Vec).bind_constructor()
    context.set_class("Vec", vec)
    handle = context.run("Vec(1, 2)")
    assert context.from_script(handle, Vec) is vec.unwrap(handle)
    assert context.from_script(None, Vec) is None
    assert context.from_script(handle) is vec.unwrap(handle)
    assert context.from_script([handle]) == [vec.unwrap(handle)]
    with pytest.raises(ConversionError):
        context.from_script(3, Vec)
    with pytest.raises(ConversionError):
        context.from_script(context.obj.Object(), Vec)

def test_shared_argument(context):
    vec = context.classes.register(Vec, SHARED).bind_constructor()
    context.set_class("Vec", vec)
    handle = context.run("Vec(1, 2)")
    share = context.from_script(handle, Shared)
    assert isinstance(share, Shared)
    assert share.use_count == 2
    share.release()
    assert context.from_script(None, Shared) is None
    with pytest.raises(ConversionError):
        context.from_script(1, Shared)

def test_to_script(context):
    vec = context.classes.register(Vec)
    handle = vec.create_wrapped()
    assert context.to_script([vec.unwrap(handle), 1]) == [handle, 1]
    assert context.to_script((None, "a")) == (None, "a")
    assert context.to_script(range(2)) == [0, 1]
    with pytest.raises(ConversionError):
        context.to_script(Shared())
    with pytest.raises(ConversionError):
        context.to_script(object())

def test_converters(context):
    context.converters.add(Color,
        to_script=lambda context, color: color.name,
        from_script=lambda context, value: Color(value))
    assert context.to_script(Color("red")) == "red"
    assert context.from_script("blue", Color).name == "blue"

    def paint(color: Color):
        return Color(color.name.upper())
    context.classes.register(Vec).bind_function("paint", paint)
    context.set_class("Vec", context.classes.find(Vec))
    assert context.run("Vec.paint('green')") == "GREEN"

    context.converters.remove(Color)
    with pytest.raises(ConversionError):
        context.to_script(Color("red"))

builtin_type = type
