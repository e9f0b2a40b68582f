import enum
import inspect
from nativebind.context.objects import Member
from nativebind.exceptions import QualifierMismatch
from nativebind.utils.code import InlineException
from nativebind.utils.string import escape

class Qualifier(enum.Flag):
    """
        how an instance is declared and what a method accepts

        a method can be called on an instance if the method's qualifier includes the instance's,
        e.g. a CONST method on a mutable instance, never a mutable method on a CONST instance
    """
    NONE = 0
    CONST = 1
    VOLATILE = 2
    CONST_VOLATILE = 3

# fallback order once the exact qualifier has no binding
PREFERENCE = [Qualifier.CONST, Qualifier.VOLATILE, Qualifier.CONST_VOLATILE]

def accepts(method_qualifier, instance_qualifier):
    return (method_qualifier & instance_qualifier) == instance_qualifier

def callback(func):
    """
        marks a native that takes the call itself:
            func(info) with info.context, info.this and the script args in info.args
        instead of converted arguments
    """
    func.__nb_callback__ = True
    return func
def is_callback(func):
    return getattr(func, "__nb_callback__", False)

class CallInfo:
    def __init__(self, context, this, args):
        self.context = context
        self.this = this
        self.args = list(args)
    def __len__(self):
        return len(self.args)
    def __getitem__(self, index):
        return self.args[index]
    def __repr__(self):
        return "<CallInfo this={!r} args={!r}>".format(self.this, self.args)

def annotations(func, skip=0):
    """
        parameter annotations of a native, (positional, rest)

        string annotations and missing ones are None, conversion is then generic
    """
    try:
        sign = inspect.signature(func)
    except (TypeError, ValueError):
        return [], None
    params, rest = [], None
    for param in list(sign.parameters.values())[skip:]:
        annotation = param.annotation
        if annotation is inspect.Parameter.empty or isinstance(annotation, str):
            annotation = None
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            params.append(annotation)
        elif param.kind == inspect.Parameter.VAR_POSITIONAL:
            rest = annotation
    return params, rest

def convert_args(context, func, args, skip=0):
    params, rest = annotations(func, skip)
    values = []
    for i, arg in enumerate(args):
        type = params[i] if i < len(params) else rest
        values.append(context.from_script(arg, type))
    return values

def unbind(func):
    if isinstance(func, (staticmethod, classmethod)):
        return func.__func__
    return func

class Bound(Member):
    """
        a member of a registered class

        owner is the descriptor the member was bound on,
        the object it is reached through may be wrapped by a derived class, owner.resolve casts it
    """
    def __init__(self, owner, name):
        self.owner = owner
        self.name = name
    def instance(self, this):
        resolved = self.owner.resolve(this)
        if resolved is None:
            raise TypeError("{}.{} used on {}, which wraps no {}".format(
                self.owner.name, self.name, repr(this), self.owner.name))
        return resolved
    def writable(self, this):
        instance, qualifier = self.instance(this)
        if qualifier & Qualifier.CONST:
            raise QualifierMismatch("can't set {}.{} of a const instance".format(self.owner.name, self.name))
        return instance
    def __repr__(self):
        return "<{} {}.{}>".format(type(self).__name__, self.owner.name, self.name)

class Constant(Bound):
    static = True
    def __init__(self, owner, name, value):
        super().__init__(owner, name)
        self.value = value
    def get(self, context, this):
        return self.value
    def set(self, context, this, value):
        raise InlineException("can't set constant {}.{}".format(self.owner.name, escape(self.name)))
    def refs(self):
        return (self.value,)

def field_accessors(name, accessor):
    if accessor is None:
        accessor = name
    if isinstance(accessor, str):
        attr = accessor
        return lambda obj: getattr(obj, attr), lambda obj, value: setattr(obj, attr, value)
    if isinstance(accessor, tuple):
        getter, setter = accessor
        return getter, setter
    if hasattr(accessor, "__get__") and hasattr(accessor, "__set__"):
        return lambda obj: accessor.__get__(obj, type(obj)), accessor.__set__
    raise TypeError("field {} needs an attribute name, a data descriptor or a (getter, setter) pair, got {!r}".format(
        escape(name), accessor))

class Field(Bound):
    """
        a data member

        writes convert to the type of the value the field holds when it's a primitive,
        other fields take whatever the script passes, unwrapped
    """
    PRIMITIVES = (bool, int, float, str)
    def __init__(self, owner, name, accessor=None):
        super().__init__(owner, name)
        self.getter, self.setter = field_accessors(name, accessor)
    def get(self, context, this):
        instance, qualifier = self.instance(this)
        return context.to_script(self.getter(instance))
    def set(self, context, this, value):
        if self.setter is None:
            raise InlineException("can't set read-only field {}.{}".format(self.owner.name, escape(self.name)))
        instance = self.writable(this)
        current = self.getter(instance)
        type = current.__class__ if isinstance(current, Field.PRIMITIVES) else None
        self.setter(instance, context.from_script(value, type))

class Property(Bound):
    def __init__(self, owner, name, getter, setter=None):
        super().__init__(owner, name)
        if isinstance(getter, property):
            if setter is None:
                setter = getter.fset
            getter = getter.fget
        self.getter = getter
        self.setter = setter
    @property
    def readonly(self):
        return self.setter is None
    def get(self, context, this):
        instance, qualifier = self.instance(this)
        return context.to_script(self.getter(instance))
    def set(self, context, this, value):
        if self.setter is None:
            raise InlineException("can't set read-only property {}.{}".format(self.owner.name, escape(self.name)))
        instance = self.writable(this)
        value, = convert_args(context, self.setter, [value], skip=1)
        self.setter(instance, value)

class Method(Bound):
    """
        an instance method with one native per qualifier

        the natives share the script name, a call dispatches on the qualifier the instance
        was wrapped with and never mixes them up
    """
    def __init__(self, owner, name):
        super().__init__(owner, name)
        self.overloads = {}
    def add(self, func, qualifier=Qualifier.NONE):
        self.overloads[qualifier] = func
    def select(self, qualifier):
        if qualifier in self.overloads:
            return self.overloads[qualifier]
        for candidate in PREFERENCE:
            if candidate in self.overloads and accepts(candidate, qualifier):
                return self.overloads[candidate]
        raise QualifierMismatch("no {}.{} accepts a {} instance".format(
            self.owner.name, self.name, qualifier.name.lower().replace("_", " ")))
    def get(self, context, this):
        return context.obj.Func(self.invoke, this=this, name=self.name)
    def set(self, context, this, value):
        raise InlineException("can't set method {}.{}".format(self.owner.name, escape(self.name)))
    def invoke(self, context, this, args):
        instance, qualifier = self.instance(this)
        func = self.select(qualifier)
        args = convert_args(context, func, args, skip=1)
        return context.to_script(func(instance, *args))

class Function(Bound):
    """
        a static function, reachable on the class and on its instances

        callbacks get the object it was called on as info.this, the class object for static calls
    """
    static = True
    def __init__(self, owner, name, func):
        super().__init__(owner, name)
        self.func = unbind(func)
    def get(self, context, this):
        return context.obj.Func(self.invoke, this=this, name=self.name)
    def set(self, context, this, value):
        raise InlineException("can't set function {}.{}".format(self.owner.name, escape(self.name)))
    def invoke(self, context, this, args):
        if is_callback(self.func):
            return context.to_script(self.func(CallInfo(context, this, args)))
        args = convert_args(context, self.func, args)
        return context.to_script(self.func(*args))
