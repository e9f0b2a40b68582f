from nativebind.classes.cast import CastLink, chain, walk
from nativebind.classes.instances import InstanceTable, Entry, Tag
from nativebind.classes.members import Qualifier, Constant, Field, Property, Method, Function, CallInfo, \
    convert_args, is_callback, unbind
from nativebind.classes.traits import RawTraits, Shared, dispose, identity
from nativebind.context.objects import Object
from nativebind.exceptions import AlreadyRegistered, AlreadyLinked, AlreadyBound, UnregisteredType, \
    InstanceNotTracked, ConversionError
from nativebind.utils.string import escape

class ClassDescriptor:
    """
        one native type bound into one context under one ownership trait

        the descriptor owns the script class (members, constructor, base)
        and the instance table of every live wrapper it made

        LIFETIME:
        an instance gets an entry when it's constructed from script, created with create_wrapped,
        or wrapped with reference_external/import_external
            reference_external: strong, not owned - survives collections until unreferenced
            import_external, create_wrapped, script construction: weak, owned
        the entry goes away with unreference_external, destroy_object, destroy_all,
        or when a collection finds a weak wrapper unreachable
        removing an entry empties its wrapper, owned or explicitly destroyed instances
        are destroyed through the trait
        an unregistered descriptor is detached: its class can no longer construct or wrap
    """
    def __init__(self, registry, type, traits=RawTraits, destructor=None):
        self.registry = registry
        self.context = registry.context
        self.type = type
        self.traits = traits
        self.destructor = destructor if destructor is not None else dispose
        self.factory = None
        self.link = None
        self.instances = InstanceTable()
        self.script_class = self.context.obj.Class(type.__name__)
        self.members = self.script_class.__members__
    @property
    def name(self):
        return self.type.__name__
    def __repr__(self):
        return "<ClassDescriptor {} {}>".format(self.name, self.traits.name)

    # binding
    def check_name(self, name, qualifier=None):
        member = self.members.get(name)
        if member is None:
            return
        if qualifier is not None and isinstance(member, Method) and qualifier not in member.overloads:
            return
        raise AlreadyBound("{} already has a binding named {}".format(self.name, escape(name)))
    def bind_constructor(self, factory=None):
        """
            makes the class constructible from script

            factory(*args) gets the converted script arguments, the type itself by default
            a @callback factory gets the CallInfo instead
            a factory may return a plain instance or, for shared classes, a Shared
        """
        if self.factory is not None:
            raise AlreadyBound("{} already has a constructor".format(self.name))
        self.factory = factory if factory is not None else self.type
        self.script_class.new = self.construct
        return self
    def bind_constant(self, name, value):
        self.check_name(name)
        value = self.context.to_script(value)
        self.members[name] = Constant(self, name, value)
        return self
    def bind_field(self, name, accessor=None):
        self.check_name(name)
        self.members[name] = Field(self, name, accessor)
        return self
    def bind_property(self, name, getter, setter=None):
        self.check_name(name)
        self.members[name] = Property(self, name, getter, setter)
        return self
    def bind_method(self, name, func, qualifier=Qualifier.NONE, static=False):
        """
            an instance method, one per qualifier under the same name

            staticmethods and @callback natives bind as static functions
        """
        if static or isinstance(func, (staticmethod, classmethod)) or is_callback(unbind(func)):
            return self.bind_function(name, func)
        qualifier = Qualifier(qualifier)
        self.check_name(name, qualifier)
        method = self.members.get(name)
        if method is None:
            method = Method(self, name)
        method.add(func, qualifier)
        self.members[name] = method
        return self
    def bind_function(self, name, func):
        self.check_name(name)
        self.members[name] = Function(self, name, func)
        return self
    def link_base(self, base, cast=None):
        """
            sets the one base of the class

            base members become visible on this class's wrappers, instances are adjusted
            with cast before a base member sees them
        """
        if self.link is not None:
            raise AlreadyLinked("{} already inherits {}".format(self.name, self.link.base.name))
        if not isinstance(base, ClassDescriptor):
            base = self.registry.find(base)
        if base.registry is not self.registry:
            raise ValueError("{} is registered in another context".format(base.name))
        if base.traits is not self.traits:
            raise TypeError("{} is {} but {} is {}".format(self.name, self.traits.name, base.name, base.traits.name))
        if any(descriptor is self for descriptor in chain(base)):
            raise ValueError("{} can't inherit itself".format(self.name))
        if cast is None and not issubclass(self.type, base.type):
            raise TypeError("{} doesn't derive from {}, link it with a cast".format(self.name, base.name))
        self.link = CastLink(self, base, cast)
        self.script_class.__base__ = base.script_class
        return self

    # wrappers
    def resolve(self, handle):
        """
            (instance, qualifier) of a wrapper as this class sees it, or None

            a wrapper made by a derived class is cast along its chain
        """
        tag = handle.__internal__ if isinstance(handle, Object) else None
        if tag is None:
            return None
        instance = walk(tag.descriptor, tag.instance, self)
        if instance is None:
            return None
        return instance, tag.qualifier
    def unwrap(self, handle):
        """
            the native behind a wrapper, None if it wraps nothing of this class

            shared classes hand out a new share, the caller releases it
        """
        tag = handle.__internal__ if isinstance(handle, Object) else None
        if tag is None or self.resolve(handle) is None:
            return None
        return tag.descriptor.traits.cast(tag.pointer, lambda instance: walk(tag.descriptor, instance, self))
    def native(self, handle):
        resolved = self.resolve(handle)
        return resolved[0] if resolved is not None else None
    def find_object(self, instance):
        entry = self.instances.get(identity(instance))
        if entry is None:
            return None
        return self.context.heap.local(entry.wrapper)
    def wrap(self, instance):
        handle = self.find_object(instance)
        if handle is None:
            raise InstanceNotTracked("{} {!r} has no wrapper".format(self.name, instance))
        return handle
    def wrap_pointer(self, pointer, owned, strong, qualifier):
        """
            the wrapper of pointer, made if the instance isn't tracked yet

            the pointer belongs to the table from here on,
            a second wrap of a tracked instance reuses the entry and drops the extra pointer
            strong wrapping promotes a weak entry, weak wrapping never demotes
        """
        key = self.traits.pointer_id(pointer)
        entry = self.instances.get(key)
        if entry is not None:
            if pointer is not entry.pointer:
                self.traits.release(pointer)
            if strong and not entry.strong:
                entry.handle.clear_weak()
            return self.context.heap.local(entry.wrapper)
        obj = self.context.obj.Object(self.script_class)
        obj.__internal__ = Tag(self, pointer, qualifier)
        handle = self.context.persistent(obj)
        if not strong:
            handle.set_weak(self.finalize)
        self.instances.add(key, Entry(pointer, handle, owned, qualifier))
        return self.context.heap.local(obj)
    def check_instance(self, value):
        instance = value.get() if isinstance(value, Shared) else value
        if not isinstance(instance, self.type):
            raise TypeError("expected {} instance, got {!r}".format(self.name, instance))
    def check_registered(self):
        if self.registry.get(self.type) is not self:
            raise UnregisteredType("class {} was unregistered".format(self.name))
    def create(self, *args):
        """a new native through the trait, destroyed with the class's destructor"""
        return self.traits.create(self.type, *args, destructor=self.destructor)
    def detach(self):
        self.script_class.new = None
    def construct(self, context, args):
        self.check_registered()
        factory = self.factory
        if is_callback(factory):
            obj = factory(CallInfo(context, None, args))
        else:
            obj = factory(*convert_args(context, factory, args))
        self.check_instance(obj)
        pointer = self.traits.adopt(obj, self.destructor)
        return self.wrap_pointer(pointer, owned=True, strong=False, qualifier=Qualifier.NONE)

    # lifecycle
    def create_wrapped(self, *args, qualifier=Qualifier.NONE):
        self.check_registered()
        pointer = self.traits.adopt(self.create(*args), self.destructor)
        return self.wrap_pointer(pointer, owned=True, strong=False, qualifier=Qualifier(qualifier))
    def reference_external(self, instance, qualifier=Qualifier.NONE):
        self.check_registered()
        self.check_instance(instance)
        pointer = self.traits.take(instance)
        return self.wrap_pointer(pointer, owned=False, strong=True, qualifier=Qualifier(qualifier))
    def import_external(self, instance, qualifier=Qualifier.NONE):
        self.check_registered()
        self.check_instance(instance)
        pointer = self.traits.take(instance)
        return self.wrap_pointer(pointer, owned=True, strong=False, qualifier=Qualifier(qualifier))
    def unreference_external(self, instance):
        self.release(self.tracked(instance), destroy=False)
    def destroy_object(self, instance):
        self.release(self.tracked(instance), destroy=True)
    def tracked(self, instance):
        key = identity(instance)
        if key not in self.instances:
            raise InstanceNotTracked("{} {!r} has no wrapper".format(self.name, instance))
        return key
    def release(self, key, destroy):
        entry = self.instances.remove(key)
        if entry is None:
            return False
        self.forget(entry, destroy)
        return True
    def forget(self, entry, destroy):
        obj = entry.wrapper
        entry.handle.reset()
        if obj is not None:
            obj.__internal__ = None
        if destroy:
            self.traits.destroy(entry.pointer, self.destructor)
        else:
            self.traits.release(entry.pointer)
    def finalize(self, obj):
        # the collector found the wrapper unreachable, its handle is already reset
        tag = obj.__internal__
        if tag is None:
            return
        key = self.traits.pointer_id(tag.pointer)
        entry = self.instances.get(key)
        if entry is None or not self.traits.same(entry.pointer, tag.pointer) or entry.handle.get() is not None:
            obj.__internal__ = None
            return
        self.release(key, destroy=entry.owned)
        obj.__internal__ = None
    def destroy_all(self):
        """
            releases every tracked instance, destroying the owned ones

            the table is empty afterwards, calling it again does nothing
        """
        error = None
        for entry in self.instances.clear():
            try:
                self.forget(entry, destroy=entry.owned)
            except Exception as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error

class ClassRegistry:
    """
        the class descriptors of one context, by native type
    """
    def __init__(self, context):
        self.context = context
        self.classes = {}
    def __len__(self):
        return len(self.classes)
    def __iter__(self):
        return iter(list(self.classes.values()))
    def __contains__(self, type):
        return type in self.classes
    def register(self, type, traits=RawTraits, destructor=None):
        if type in self.classes:
            raise AlreadyRegistered("class {} is already registered".format(type.__name__))
        descriptor = ClassDescriptor(self, type, traits, destructor)
        self.classes[type] = descriptor
        return descriptor
    def get(self, type):
        return self.classes.get(type)
    def find(self, type):
        descriptor = self.classes.get(type)
        if descriptor is None:
            raise UnregisteredType("class {} is not registered".format(getattr(type, "__name__", type)))
        return descriptor
    def unregister(self, type):
        descriptor = self.find(type)
        for other in self.classes.values():
            if other.link is not None and other.link.base is descriptor:
                raise ValueError("class {} is the base of {}".format(descriptor.name, other.name))
        descriptor.destroy_all()
        descriptor.detach()
        del self.classes[type]
    def to_script(self, instance):
        registered = False
        for cls in type(instance).__mro__:
            descriptor = self.classes.get(cls)
            if descriptor is None:
                continue
            registered = True
            handle = descriptor.find_object(instance)
            if handle is not None:
                return handle
        if registered:
            raise InstanceNotTracked("{!r} has no wrapper".format(instance))
        raise ConversionError("can't convert {} to a script value".format(type(instance).__name__))
    def native(self, handle):
        """the raw native of a wrapper, as the class that made it sees it"""
        tag = handle.__internal__ if isinstance(handle, Object) else None
        if tag is None:
            return None
        return tag.instance
    def destroy(self):
        error = None
        for descriptor in list(self.classes.values()):
            try:
                descriptor.destroy_all()
            except Exception as exc:
                if error is None:
                    error = exc
            descriptor.detach()
        self.classes.clear()
        if error is not None:
            raise error

def add_classes(context):
    context.classes = ClassRegistry(context)

    def register(type, traits=RawTraits, destructor=None):
        return context.classes.register(type, traits, destructor)
    def set_value(name, value):
        context.globals[name] = value
        return context
    def set_class(name, descriptor):
        return set_value(name, descriptor.script_class)
    def dispose():
        context.classes.destroy()
        context.globals.clear()
        context.last_value = None

    for name in "register set_value set_class dispose".split():
        context.__dict__[name] = locals()[name]
