class Context:
    def __init__(self, gc_threshold=None, trace=False):
        """
            a script runtime with its own class registry

            ASSEMBLY:
            parts are added in dependency order, each one attaches its functions to the context
            objects need the heap to allocate, conversion needs objects,
            the registry needs conversion for constants and the heap for handles

            gc_threshold: collect between top-level statements once that many objects were allocated
            trace: print every call made through the context, see context.logging
        """
        self.gc_threshold = gc_threshold
        self.globals = {}
        self.builtins = {}
        self.last_value = None

        from nativebind.context.exceptions import add_exceptions
        add_exceptions(self)
        from nativebind.context.heap import add_heap
        add_heap(self)
        from nativebind.context.objects import add_objects
        add_objects(self)
        from nativebind.context.convert import add_convert
        add_convert(self)
        from nativebind.classes.descriptor import add_classes
        add_classes(self)
        from nativebind.context.eval import add_eval, add_builtins
        add_eval(self)
        add_builtins(self)
        from nativebind.context.logging import add_logging
        add_logging(self)

        if trace:
            self.logging()()
    def __repr__(self):
        return "<Context {} classes, {} globals>".format(len(self.classes), len(self.globals))
