"""
    ownership traits

    a trait decides what the registry keeps for a native instance (its "pointer"),
    how the instance is created, compared and destroyed

    RawTraits: the pointer is the instance itself, the script side owns it alone
        destroying calls the destructor right away
    SharedTraits: the pointer is a Shared, one of possibly many owners
        destroying releases the script side's share, the destructor runs with the last one

    the destructor of a class defaults to dispose(), which calls the instance's close()
"""

def dispose(obj):
    close = getattr(obj, "close", None)
    if callable(close):
        close()

def identity(value):
    """
        the key an instance is tracked under

        a Shared is tracked under its pointee, the same as the plain instance
    """
    if isinstance(value, Shared):
        return id(value.get())
    return id(value)

class Shared:
    """
        a counted share of a native instance

        copy() adds an owner, release() drops this one,
        the deleter runs exactly once, when the last owner of the block releases
        alias() is a share of the same block that points at a different object,
        used to hand out a base-class view of a derived instance

        shares compare equal when they point at the same object
    """
    class Block:
        def __init__(self, obj, deleter):
            self.obj = obj
            self.deleter = deleter
            self.count = 1

    def __init__(self, obj=None, deleter=dispose):
        self.block = Shared.Block(obj, deleter) if obj is not None else None
        self.ptr = obj
    @staticmethod
    def from_block(block, ptr):
        share = Shared()
        block.count += 1
        share.block = block
        share.ptr = ptr
        return share

    def get(self):
        return self.ptr
    @property
    def use_count(self):
        return self.block.count if self.block is not None else 0
    def copy(self):
        return self.alias(self.ptr)
    def alias(self, ptr):
        if self.block is None:
            return Shared()
        return Shared.from_block(self.block, ptr)
    def release(self):
        block = self.block
        if block is None:
            return
        self.block, self.ptr = None, None
        block.count -= 1
        if block.count == 0:
            obj, block.obj = block.obj, None
            block.deleter(obj)

    def __bool__(self):
        return self.ptr is not None
    def __eq__(self, other):
        if isinstance(other, Shared):
            return self.ptr is other.ptr
        return NotImplemented
    def __hash__(self):
        return id(self.ptr)
    def __repr__(self):
        return "<Shared {!r} use_count={}>".format(self.ptr, self.use_count)

class RawTraits:
    name = "raw"

    @staticmethod
    def create(type, *args, destructor=dispose):
        # raw pointers get the destructor in destroy
        return type(*args)
    @staticmethod
    def adopt(obj, destructor):
        return obj
    @staticmethod
    def take(value):
        if isinstance(value, Shared):
            raise TypeError("raw class can't take a shared instance, pass {!r}".format(value.get()))
        return value
    @staticmethod
    def destroy(pointer, destructor):
        destructor(pointer)
    @staticmethod
    def release(pointer):
        pass
    @staticmethod
    def get(pointer):
        return pointer
    @staticmethod
    def cast(pointer, fn):
        return fn(pointer)
    @staticmethod
    def pointer_id(pointer):
        return id(pointer)
    @staticmethod
    def same(a, b):
        return a is b

class SharedTraits:
    name = "shared"

    @staticmethod
    def create(type, *args, destructor=dispose):
        return Shared(type(*args), destructor)
    @staticmethod
    def adopt(obj, destructor):
        if isinstance(obj, Shared):
            return obj
        return Shared(obj, destructor)
    @staticmethod
    def take(value):
        if not isinstance(value, Shared):
            raise TypeError("shared class expects a Shared instance, got {!r}".format(value))
        if not value:
            raise TypeError("can't take an empty share")
        return value.copy()
    @staticmethod
    def destroy(pointer, destructor):
        # NOTE: the destructor was bound to the block when the instance was adopted
        pointer.release()
    @staticmethod
    def release(pointer):
        pointer.release()
    @staticmethod
    def get(pointer):
        return pointer.get()
    @staticmethod
    def cast(pointer, fn):
        # a share of the same block, pointing at what fn makes of the instance
        return pointer.alias(fn(pointer.get()))
    @staticmethod
    def pointer_id(pointer):
        return id(pointer.get())
    @staticmethod
    def same(a, b):
        return a == b

RAW = RawTraits
SHARED = SharedTraits
