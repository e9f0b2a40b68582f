from nativebind.classes.traits import Shared
from nativebind.context.objects import Object
from nativebind.exceptions import ConversionError

class Converters:
    """
        custom conversions, consulted before the built-in rules

        to_script(context, value) for values whose type (or a base of it) was added,
        from_script(context, value) when a native asks for exactly that type
    """
    def __init__(self):
        self.map = {}
    def add(self, type, to_script=None, from_script=None):
        self.map[type] = (to_script, from_script)
    def remove(self, type):
        self.map.pop(type, None)
    def to(self, value):
        for cls in type(value).__mro__:
            if cls in self.map and self.map[cls][0] is not None:
                return self.map[cls][0]
        return None
    def from_(self, type):
        if type in self.map:
            return self.map[type][1]
        return None

PRIMITIVES = (bool, int, float, str)

def add_convert(context):
    converters = Converters()
    context.converters = converters

    def describe(value):
        return "{} {!r}".format(context.type_name(value), value)
    def to_script(value):
        """
            a native value as a script value

            an instance of a registered class converts to its wrapper,
            it has to be tracked: an unreferenced instance doesn't get a new one silently
        """
        if value is None or isinstance(value, PRIMITIVES):
            return value
        if isinstance(value, Object):
            return value
        convert = converters.to(value)
        if convert is not None:
            return convert(context, value)
        if isinstance(value, (list, tuple)):
            return type(value)(to_script(item) for item in value)
        if isinstance(value, range):
            return list(value)
        if isinstance(value, Shared):
            if not value:
                raise ConversionError("can't convert an empty share")
            value = value.get()
        return context.classes.to_script(value)
    def from_script(value, type=None):
        """
            a script value as the native type asks for it

            no type: wrappers give their native, the rest passes
            int, float, str, bool are checked, bool is not taken for a number
            a registered class unwraps through its descriptor, None is the null instance
            Shared gives a new share of a wrapped shared instance
        """
        if type is None or type is object:
            return generic(value)
        convert = converters.from_(type)
        if convert is not None:
            return convert(context, value)
        if type is bool:
            if isinstance(value, bool):
                return value
        elif type is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
        elif type is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        elif type is str:
            if isinstance(value, str):
                return value
        elif type in (list, tuple):
            if isinstance(value, (list, tuple)):
                return type(generic(item) for item in value)
        elif type is Shared:
            if value is None:
                return None
            tag = value.__internal__ if isinstance(value, Object) else None
            if tag is not None and isinstance(tag.pointer, Shared):
                return tag.descriptor.unwrap(value)
        else:
            descriptor = context.classes.get(type)
            if descriptor is not None:
                if value is None:
                    return None
                instance = descriptor.native(value)
                if instance is not None:
                    return instance
            elif isinstance(type, builtin_type) and isinstance(value, type):
                return value
        raise ConversionError("expected {}, got {}".format(getattr(type, "__name__", type), describe(value)))
    def generic(value):
        if isinstance(value, Object) and value.__internal__ is not None:
            return context.classes.native(value)
        if isinstance(value, list):
            return [generic(item) for item in value]
        return value

    for name in "to_script from_script".split():
        context.__dict__[name] = locals()[name]

builtin_type = type
