from nativebind.classes.members import Qualifier

class Tag:
    """
        what a wrapper keeps in its internal slot

        the descriptor that made the wrapper, the trait pointer of the instance
        and the qualifier the instance was wrapped with
    """
    __slots__ = ("descriptor", "pointer", "qualifier")
    def __init__(self, descriptor, pointer, qualifier=Qualifier.NONE):
        self.descriptor = descriptor
        self.pointer = pointer
        self.qualifier = qualifier
    @property
    def instance(self):
        return self.descriptor.traits.get(self.pointer)
    def __repr__(self):
        return "<Tag {} {!r}>".format(self.descriptor.name, self.instance)

class Entry:
    """
        one tracked instance

        pointer belongs to the entry: for shared classes it is the script side's share
        handle is the persistent handle of the wrapper, weak entries are collector eligible
        owned entries are destroyed when released, the others (external references) only dropped
    """
    __slots__ = ("pointer", "handle", "owned", "qualifier")
    def __init__(self, pointer, handle, owned, qualifier):
        self.pointer = pointer
        self.handle = handle
        self.owned = owned
        self.qualifier = qualifier
    @property
    def strong(self):
        return not self.handle.weak
    @property
    def wrapper(self):
        return self.handle.get()
    def __repr__(self):
        return "<Entry {} {}{!r}>".format("strong" if self.strong else "weak", "owned " if self.owned else "", self.wrapper)

class InstanceTable:
    """
        native identity -> Entry, at most one entry per identity

        identities are ids of the instances, the entries keep the instances alive
        so an id can't be reused while it's tracked
    """
    def __init__(self):
        self.entries = {}
    def __len__(self):
        return len(self.entries)
    def __contains__(self, key):
        return key in self.entries
    def __iter__(self):
        return iter(list(self.entries.values()))
    def get(self, key):
        return self.entries.get(key)
    def add(self, key, entry):
        if key in self.entries:
            raise KeyError("instance {:#x} is already tracked".format(key))
        self.entries[key] = entry
    def remove(self, key):
        return self.entries.pop(key, None)
    def clear(self):
        entries = list(self.entries.values())
        self.entries.clear()
        return entries
