from nativebind import Context, RAW, SHARED, Shared, Qualifier, callback
from nativebind.classes import register, find_object
from nativebind.exceptions import AlreadyBound, InstanceNotTracked, ConversionError, UnregisteredType, QualifierMismatch
import pytest

class Counter:
    live = 0
    def __init__(self, value=0):
        self.value = value
        Counter.live += 1
    def close(self):
        Counter.live -= 1
    def read(self):
        return self.value
    def bump(self):
        self.value += 1
        return self.value

class Holder:
    """keeps its counter aside instead of deriving from it"""
    def __init__(self):
        self.inner = Counter(7)
    def close(self):
        self.inner.close()

@pytest.fixture
def context():
    Counter.live = 0
    context = Context()
    counter = register(context, Counter)
    counter.bind_constructor().bind_field("value").bind_method("read", Counter.read)
    counter.bind_method("read_const", Counter.read, Qualifier.CONST)
    counter.bind_method("bump", Counter.bump)
    context.set_class("Counter", counter)
    return context

def test_wrap_twice_reuses_wrapper(context):
    counter = context.classes.find(Counter)
    obj = Counter()
    first = counter.reference_external(obj)
    assert counter.reference_external(obj) is first
    assert counter.import_external(obj) is first
    assert len(counter.instances) == 1
    assert counter.wrap(obj) is first

def test_reference_promotes_weak(context):
    counter = context.classes.find(Counter)
    obj = Counter()
    handle = counter.import_external(obj)
    counter.reference_external(obj)
    context.collect()
    assert find_object(context, Counter, obj) is handle
    assert not handle.empty
    assert Counter.live == 1

def test_import_keeps_strong(context):
    counter = context.classes.find(Counter)
    obj = Counter()
    handle = counter.reference_external(obj)
    counter.import_external(obj)
    context.collect()
    assert counter.find_object(obj) is handle
    # still a referenced instance: unreferencing doesn't destroy it
    counter.unreference_external(obj)
    assert Counter.live == 1

def test_collect_weak(context):
    counter = context.classes.find(Counter)
    handle = counter.create_wrapped(3)
    obj = counter.unwrap(handle)
    assert Counter.live == 1
    assert context.collect() == 1
    assert Counter.live == 0
    assert handle.empty
    assert counter.find_object(obj) is None
    assert context.collect() == 0

def test_reachable_survives(context):
    counter = context.classes.find(Counter)
    context.set_value("c", counter.create_wrapped(3))
    context.run("l = [Counter(1), Counter(2)]\n0")
    context.collect()
    assert Counter.live == 3
    context.run("l = None\nc = None")
    context.collect()
    assert Counter.live == 0

def test_handle_scope(context):
    counter = context.classes.find(Counter)
    with context.handle_scope():
        handle = counter.create_wrapped()
        context.collect()
        assert not handle.empty
    context.collect()
    assert handle.empty
    assert Counter.live == 0

def test_gc_threshold():
    Counter.live = 0
    context = Context(gc_threshold=5)
    register(context, Counter).bind_constructor()
    context.set_class("Counter", context.classes.find(Counter))
    # never inside a statement: the list keeps all of them
    context.run("l = [Counter(), Counter(), Counter(), Counter(), Counter(), Counter()]")
    assert Counter.live == 6
    assert context.heap.collections == 1
    context.run("l = None\nfor i in range(6):\n    Counter()")
    assert Counter.live == 0
    assert context.heap.collections == 2

def test_first_qualifier_wins(context):
    counter = context.classes.find(Counter)
    obj = Counter()
    handle = counter.reference_external(obj, qualifier=Qualifier.CONST)
    counter.reference_external(obj)
    assert handle.__internal__.qualifier is Qualifier.CONST

def test_const_instance(context):
    counter = context.classes.find(Counter)
    context.set_value("c", counter.reference_external(Counter(4), qualifier=Qualifier.CONST))
    assert context.run("c.read_const()") == 4
    assert context.run("c.value") == 4
    with pytest.raises(QualifierMismatch):
        context.run("c.bump()")
    with pytest.raises(QualifierMismatch):
        context.run("c.value = 5")

def test_qualifier_overloads():
    context = Context()
    counter = register(context, Counter)
    counter.bind_method("get", lambda self: "mutable")
    counter.bind_method("get", lambda self: "const", Qualifier.CONST)
    counter.bind_method("get", lambda self: "const volatile", Qualifier.CONST_VOLATILE)
    with pytest.raises(AlreadyBound):
        counter.bind_method("get", lambda self: "again", Qualifier.CONST)
    for qualifier, result in [
        (Qualifier.NONE, "mutable"),
        (Qualifier.CONST, "const"),
        (Qualifier.VOLATILE, "const volatile"),
        (Qualifier.CONST_VOLATILE, "const volatile"),
    ]:
        context.set_value("c", counter.reference_external(Counter(), qualifier=qualifier))
        assert context.run("c.get()") == result

def test_name_collision(context):
    counter = context.classes.find(Counter)
    with pytest.raises(AlreadyBound):
        counter.bind_field("read")
    with pytest.raises(AlreadyBound):
        counter.bind_constant("value", 1)
    with pytest.raises(AlreadyBound):
        counter.bind_method("value", Counter.read, Qualifier.CONST)
    with pytest.raises(AlreadyBound):
        counter.bind_constructor()
    assert context.run("Counter(2).read()") == 2

def test_destroy_all(context):
    counter = context.classes.find(Counter)
    referenced = Counter()
    counter.reference_external(referenced)
    imported = counter.import_external(Counter())
    counter.create_wrapped()
    assert Counter.live == 3
    counter.destroy_all()
    assert Counter.live == 1
    assert imported.empty
    assert len(counter.instances) == 0
    counter.destroy_all()
    assert Counter.live == 1
    with pytest.raises(InstanceNotTracked):
        context.to_script(referenced)

def test_unwrap_foreign(context):
    counter = context.classes.find(Counter)
    assert counter.unwrap(context.obj.Object()) is None
    assert counter.unwrap(3) is None
    assert counter.unwrap(None) is None

def test_cast_link():
    Counter.live = 0
    context = Context()
    counter = register(context, Counter).bind_method("read", Counter.read)
    holder = register(context, Holder).bind_constructor()
    with pytest.raises(TypeError):
        holder.link_base(Counter)
    holder.link_base(Counter, cast=lambda holder: holder.inner)
    context.set_class("Holder", holder)
    assert context.run("Holder().read()") == 7
    handle = context.run("h = Holder()")
    assert counter.unwrap(handle).value == 7
    assert counter.unwrap(handle) is context.classes.native(handle).inner

def test_link_checks():
    context = Context()
    raw = register(context, Counter)
    shared = register(context, Holder, SHARED)
    with pytest.raises(TypeError):
        shared.link_base(raw, cast=lambda holder: holder.inner)
    other = Context()
    with pytest.raises(ValueError):
        raw.link_base(register(other, Holder))
    with pytest.raises(UnregisteredType):
        raw.link_base(dict)
    assert raw.link is None and shared.link is None

def test_unregister(context):
    counter = context.classes.find(Counter)
    counter.create_wrapped()
    context.classes.unregister(Counter)
    assert Counter.live == 0
    assert Counter not in context.classes
    with pytest.raises(UnregisteredType):
        find_object(context, Counter, Counter())

def test_unregistered_class_is_detached(context):
    counter = context.classes.find(Counter)
    context.classes.unregister(Counter)
    with pytest.raises(TypeError):
        context.run("c = Counter()")
    with pytest.raises(UnregisteredType):
        counter.create_wrapped()
    external = Counter()
    with pytest.raises(UnregisteredType):
        counter.import_external(external)
    with pytest.raises(UnregisteredType):
        counter.reference_external(external)
    external.close()
    assert Counter.live == 0
    assert len(counter.instances) == 0

def test_unregister_base():
    context = Context()
    register(context, Counter)
    register(context, Holder).link_base(Counter, cast=lambda holder: holder.inner)
    with pytest.raises(ValueError):
        context.classes.unregister(Counter)
    context.classes.unregister(Holder)
    context.classes.unregister(Counter)
    assert len(context.classes) == 0

def test_dispose(context):
    counter = context.classes.find(Counter)
    counter.create_wrapped()
    counter.reference_external(Counter())
    context.dispose()
    assert Counter.live == 1
    assert counter.script_class.new is None
    assert len(context.classes) == 0
    assert not context.globals
    context.dispose()

def test_to_script_unregistered(context):
    with pytest.raises(ConversionError):
        context.to_script(Holder())

def test_shared_survives_collection():
    Counter.live = 0
    context = Context()
    counter = register(context, Counter, SHARED)
    kept = Shared(Counter(5))
    handle = counter.import_external(kept)
    assert kept.use_count == 2
    context.collect()
    assert handle.empty
    assert kept.use_count == 1
    assert Counter.live == 1
    kept.release()
    assert Counter.live == 0

@pytest.mark.parametrize("traits", [RAW, SHARED])
def test_custom_destructor(traits):
    closed = []
    context = Context()
    counter = register(context, Counter, traits, destructor=closed.append)
    @callback
    def make(info):
        return counter.create(*info.args)
    counter.bind_constructor(make)
    context.set_class("Counter", counter)
    context.run("Counter(1)")
    counter.create_wrapped(2)
    context.run("pass")
    assert context.collect() == 2
    assert sorted(obj.value for obj in closed) == [1, 2]
