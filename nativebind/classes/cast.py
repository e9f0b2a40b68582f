"""
    the cast chain

    a class links to at most one base, the link carries the function that turns
    an instance of the class into the instance its base members work on

    in python a derived instance is already a base instance, so the default cast is identity,
    classes that keep their base part elsewhere (a proxy, an aggregated object) pass their own
"""

def upcast(obj):
    return obj

class CastLink:
    def __init__(self, derived, base, cast=None):
        self.derived = derived
        self.base = base
        self.cast = cast if cast is not None else upcast
    def __repr__(self):
        return "<CastLink {} -> {}>".format(self.derived.name, self.base.name)

def chain(descriptor):
    """the descriptor and its bases, nearest first"""
    while descriptor is not None:
        yield descriptor
        descriptor = descriptor.link.base if descriptor.link is not None else None

def walk(descriptor, instance, target):
    """
        adjusts an instance of descriptor's class to target's class one link at a time

        returns None when target is not on descriptor's chain
    """
    while descriptor is not target:
        link = descriptor.link
        if link is None:
            return None
        instance = link.cast(instance)
        descriptor = link.base
    return instance
