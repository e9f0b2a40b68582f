from nativebind import utils
from nativebind.utils.code import inline_exc, InlineException
from nativebind.utils.string import escape

class Object:
    """
        a script object

        __fields__ are the object's own properties, set from script or from python
        __internal__ is the slot a native wrapper keeps its tag in,
            an object whose slot is None wraps nothing
        __type__ is the script class whose members the object sees
    """
    def __init__(self, __type__=None, **fields):
        self.__type__ = __type__
        self.__fields__ = fields
        self.__internal__ = None
    @property
    def empty(self):
        return self.__internal__ is None
    def __repr__(self):
        name = self.__type__.__name__ if self.__type__ is not None else "Object"
        if self.__internal__ is not None:
            return "<{} wrapper at {:#x}>".format(name, id(self))
        return "<{} object at {:#x}>".format(name, id(self))

class Class(Object):
    """
        a script class

        members are looked up along the __base__ chain,
        static members are visible on the class object itself, the rest only on instances
        new is the native that constructs an instance, None means the class can't be called
    """
    def __init__(self, name, base=None, new=None):
        super().__init__()
        self.__name__ = name
        self.__base__ = base
        self.__members__ = {}
        self.new = new
    def __repr__(self):
        return "<class {}>".format(self.__name__)

class Func(Object):
    """
        a script function backed by a native

        native(context, this, args) receives script values and returns one
    """
    def __init__(self, native, this=None, name=None):
        super().__init__()
        self.native = native
        self.this = this
        self.__name__ = name or getattr(native, "__name__", "func")
    def __repr__(self):
        return "<func {}>".format(self.__name__)

class Member:
    """
        what a class stores under a name

        get and set receive the object the member was reached through,
        which is the class object itself for static access
    """
    static = False
    def get(self, context, this):
        raise InlineException("can't read attribute")
    def set(self, context, this, value):
        raise InlineException("can't set attribute")
    def refs(self):
        # script values the member keeps alive
        return ()

def add_objects(context):
    context.obj = utils.Object()
    def create(cls):
        def f(*args, **kwargs):
            obj = cls(*args, **kwargs)
            context.heap.allocate(obj)
            return obj
        context.obj[cls.__name__] = f
    for cls in [Object, Class, Func]:
        create(cls)

    def type_name(value):
        if isinstance(value, Class):
            return "class"
        if isinstance(value, Object) and value.__type__ is not None:
            return value.__type__.__name__
        if isinstance(value, Func):
            return "func"
        if value is None:
            return "null"
        return type(value).__name__
    def lookup(cls, name):
        while cls is not None:
            if name in cls.__members__:
                return cls.__members__[name]
            cls = cls.__base__
        return None

    @inline_exc(AttributeError)
    def getattr(obj, name):
        """
            returns a script value

            members of the class chain come first, same as accessors on a prototype,
            then the object's own fields
        """
        if isinstance(obj, Class):
            member = lookup(obj, name)
            if member is not None and member.static:
                return member.get(context, obj)
        elif isinstance(obj, Object) and obj.__type__ is not None:
            member = lookup(obj.__type__, name)
            if member is not None:
                return member.get(context, obj)
        if isinstance(obj, Object) and name in obj.__fields__:
            return obj.__fields__[name]
        raise InlineException("{} object has no attribute {}".format(type_name(obj), escape(name)))
    @inline_exc(AttributeError)
    def setattr(obj, name, value):
        if isinstance(obj, Class):
            member = lookup(obj, name)
            if member is not None and member.static:
                member.set(context, obj, value)
                return
        elif isinstance(obj, Object) and obj.__type__ is not None:
            member = lookup(obj.__type__, name)
            if member is not None:
                member.set(context, obj, value)
                return
        if isinstance(obj, Func) or not isinstance(obj, Object):
            raise InlineException("can't set attribute {} of {} object".format(escape(name), type_name(obj)))
        obj.__fields__[name] = value
    @inline_exc(TypeError)
    def call(func, args):
        if isinstance(func, Func):
            value = func.native(context, func.this, list(args))
        elif isinstance(func, Class):
            if func.new is None:
                raise InlineException("class {} is not constructible".format(func.__name__))
            value = func.new(context, list(args))
        else:
            raise InlineException("{} object is not callable".format(type_name(func)))
        return value

    for name in "type_name lookup getattr setattr call".split():
        context.__dict__[name] = locals()[name]
