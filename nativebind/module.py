"""
    flat property attachment

    a Module collects values, functions, classes and accessors under names
    and makes script objects out of them:

        module = Module(context)
        module.set_const("version", 3).set_function("add", add).set_class("Point", point)
        context.set_value("lib", module.new_instance())

    values are copied into every new instance, accessors live on the module's class
    and read or write the python side each time they're used
"""
from nativebind.classes.members import CallInfo, convert_args, is_callback, field_accessors
from nativebind.context.objects import Member
from nativebind.utils.code import InlineException
from nativebind.utils.string import escape

def function(context, func, name=None):
    """a script function calling func with converted arguments, or with a CallInfo for callbacks"""
    def native(context, this, args):
        if is_callback(func):
            return context.to_script(func(CallInfo(context, this, args)))
        return context.to_script(func(*convert_args(context, func, args)))
    return context.obj.Func(native, name=name or getattr(func, "__name__", None))

class Var(Member):
    def __init__(self, name, getter, setter):
        self.name = name
        self.getter = getter
        self.setter = setter
    def get(self, context, this):
        return context.to_script(self.getter())
    def set(self, context, this, value):
        if self.setter is None:
            raise InlineException("can't set read-only {}".format(escape(self.name)))
        current = self.getter()
        type = current.__class__ if isinstance(current, (bool, int, float, str)) else None
        self.setter(context.from_script(value, type))

class Accessor(Member):
    def __init__(self, name, getter, setter=None):
        self.name = name
        self.getter = getter
        self.setter = setter
    def get(self, context, this):
        return context.to_script(self.getter())
    def set(self, context, this, value):
        if self.setter is None:
            raise InlineException("can't set read-only property {}".format(escape(self.name)))
        value, = convert_args(context, self.setter, [value])
        self.setter(value)

class Const(Member):
    def __init__(self, name, value):
        self.name = name
        self.value = value
    def get(self, context, this):
        return self.value
    def set(self, context, this, value):
        raise InlineException("can't set constant {}".format(escape(self.name)))
    def refs(self):
        return (self.value,)

class Module:
    def __init__(self, context, name="module"):
        self.context = context
        self.script_class = context.obj.Class(name)
        self.values = {}
    def check_name(self, name):
        if name in self.values or name in self.script_class.__members__:
            raise ValueError("module {} already has {}".format(self.script_class.__name__, escape(name)))
    def set_value(self, name, value):
        self.check_name(name)
        self.values[name] = value
        return self
    def set_submodule(self, name, module):
        return self.set_value(name, module)
    def set_class(self, name, descriptor):
        descriptor.script_class.__name__ = name
        return self.set_value(name, descriptor.script_class)
    def set_function(self, name, func):
        return self.set_value(name, function(self.context, func, name))
    def set_var(self, name, owner, attr=None):
        """live access to an attribute of owner, attr defaults to name"""
        self.check_name(name)
        getter, setter = field_accessors(name, attr if attr is not None else name)
        self.script_class.__members__[name] = Var(name, lambda: getter(owner), lambda value: setter(owner, value))
        return self
    def set_property(self, name, getter, setter=None):
        self.check_name(name)
        self.script_class.__members__[name] = Accessor(name, getter, setter)
        return self
    def set_const(self, name, value):
        self.check_name(name)
        if isinstance(value, Module):
            value = value.new_instance()
        else:
            value = self.context.to_script(value)
        self.script_class.__members__[name] = Const(name, value)
        return self
    def new_instance(self):
        obj = self.context.obj.Object(self.script_class)
        for name, value in self.values.items():
            if isinstance(value, Module):
                value = value.new_instance()
            obj.__fields__[name] = value
        return self.context.heap.local(obj)
    def __repr__(self):
        return "<Module {}>".format(self.script_class.__name__)
