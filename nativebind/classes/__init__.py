"""
    the class registry

    classes are registered per context, context.classes.register(type) or register(context, type),
    and bound with the descriptor's bind_* calls

    the functions below are the lifecycle surface addressed by type,
    each one fails with UnregisteredType when the type has no descriptor in the context
"""
from nativebind.classes.traits import RAW, SHARED, RawTraits, SharedTraits, Shared, dispose
from nativebind.classes.members import Qualifier, CallInfo, callback
from nativebind.classes.descriptor import ClassDescriptor, ClassRegistry
from nativebind.classes.cast import CastLink

def register(context, type, traits=RawTraits, destructor=None):
    return context.classes.register(type, traits, destructor)
def find(context, type):
    return context.classes.find(type)
def unregister(context, type):
    context.classes.unregister(type)

def unwrap(context, type, handle):
    return context.classes.find(type).unwrap(handle)
def find_object(context, type, instance):
    return context.classes.find(type).find_object(instance)
def create_wrapped(context, type, *args, qualifier=Qualifier.NONE):
    return context.classes.find(type).create_wrapped(*args, qualifier=qualifier)
def reference_external(context, type, instance, qualifier=Qualifier.NONE):
    return context.classes.find(type).reference_external(instance, qualifier=qualifier)
def import_external(context, type, instance, qualifier=Qualifier.NONE):
    return context.classes.find(type).import_external(instance, qualifier=qualifier)
def unreference_external(context, type, instance):
    context.classes.find(type).unreference_external(instance)
def destroy_object(context, type, instance):
    context.classes.find(type).destroy_object(instance)
def destroy_all(context, type):
    context.classes.find(type).destroy_all()
