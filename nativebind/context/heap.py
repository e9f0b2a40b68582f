from nativebind import utils
from nativebind.context.objects import Object, Class, Func

class Persistent:
    """
        a handle python code keeps to a script object

        strong handles are collector roots
        weak handles don't keep the object alive, when a collection finds the object unreachable
        the handle is reset and its finalizer called with the object, exactly once

        a handle that was reset is empty and stays empty
    """
    def __init__(self, heap, obj):
        self.heap = heap
        self.obj = obj
        self.weak = False
        self.finalizer = None
        heap.persistents[id(self)] = self
    def get(self):
        return self.obj
    @property
    def empty(self):
        return self.obj is None
    def set_weak(self, finalizer=None):
        self.weak = True
        self.finalizer = finalizer
    def clear_weak(self):
        self.weak = False
        self.finalizer = None
    def reset(self):
        self.obj = None
        self.finalizer = None
        self.heap.persistents.pop(id(self), None)
    def __repr__(self):
        return "<{} persistent {!r}>".format("weak" if self.weak else "strong", self.obj)

class HandleScope(utils.Context):
    """
        keeps the script objects handed to python while it's open

        scopes nest, closing one drops only what was handed out inside it
    """
    def __init__(self, heap):
        self.heap = heap
        self.handles = []
    def __enter__(self):
        self.heap.scopes.append(self.handles)
        return self
    def __exit__(self, exc_type, exc, tb):
        scopes = self.heap.scopes
        for i in reversed(range(len(scopes))):
            if scopes[i] is self.handles:
                del scopes[i]
                break
        self.handles = []

class Heap:
    """
        DESIGN:
        the collector never sees python references
        a script object survives a collection if it can be reached from a root:
            the context's globals and last completion value
            the objects of open handle scopes
            strong persistent handles
        reachability follows object fields, class chains with their members, bound this,
        and the items of lists, tuples and dicts

        natives kept in __internal__ slots are not followed, they belong to the registry
    """
    def __init__(self):
        self.persistents = {}
        self.scopes = []
        self.roots = []
        self.allocated = 0
        self.collections = 0
    def allocate(self, obj):
        self.allocated += 1
        return obj
    def local(self, obj):
        if self.scopes and isinstance(obj, Object):
            self.scopes[-1].append(obj)
        return obj
    def persistent(self, obj):
        return Persistent(self, obj)
    def handle_scope(self):
        return HandleScope(self)

    def root_values(self):
        for scope in self.scopes:
            yield from scope
        for handle in list(self.persistents.values()):
            if not handle.weak and handle.obj is not None:
                yield handle.obj
        for roots in self.roots:
            yield from roots()
    @staticmethod
    def children(value):
        if isinstance(value, Object):
            if value.__type__ is not None:
                yield value.__type__
            yield from value.__fields__.values()
            if isinstance(value, Class):
                if value.__base__ is not None:
                    yield value.__base__
                for member in value.__members__.values():
                    yield from member.refs()
            if isinstance(value, Func) and value.this is not None:
                yield value.this
        elif isinstance(value, (list, tuple)):
            yield from value
        elif isinstance(value, dict):
            yield from value.values()
    def mark(self):
        marked = set()
        stack = list(self.root_values())
        while stack:
            value = stack.pop()
            if not isinstance(value, (Object, list, tuple, dict)):
                continue
            if id(value) in marked:
                continue
            marked.add(id(value))
            stack.extend(self.children(value))
        return marked
    def collect(self):
        """
            a full collection, returns how many weak handles were finalized

            finalizers run after marking, each one after its handle was reset,
            an exception from a finalizer is raised once all of them ran
        """
        marked = self.mark()
        dead = [handle for handle in list(self.persistents.values())
            if handle.weak and handle.obj is not None and id(handle.obj) not in marked]
        self.allocated = 0
        self.collections += 1
        error = None
        for handle in dead:
            obj, finalizer = handle.obj, handle.finalizer
            handle.reset()
            if finalizer is None:
                continue
            try:
                finalizer(obj)
            except Exception as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error
        return len(dead)

def add_heap(context):
    heap = Heap()
    context.heap = heap
    heap.roots.append(lambda: context.globals.values())
    heap.roots.append(lambda: [context.last_value])

    def collect():
        return heap.collect()
    def handle_scope():
        return heap.handle_scope()
    def persistent(obj):
        return heap.persistent(obj)

    for name in "collect handle_scope persistent".split():
        context.__dict__[name] = locals()[name]
