from nativebind import utils
import sys
import re

delim = ".\t".replace("\t", " " * (4 - 1))

def add_logging(context):
    from nativebind.classes.descriptor import ClassDescriptor

    class logging(utils.Context):
        """
            prints the calls made through the context and its class descriptors

            with context.logging():
                context.run(code)

            calls are indented by depth, arguments shortened to MAX_OBJ_LEN
            ~tracer suspends it, e.g. while the tracer itself takes a repr
        """
        SUPPRESS = """
            obj types exc heap classes globals builtins instructions converters
            last_value gc_threshold logging
            type_name lookup eval_node
        """.split()
        DESCRIBED = """
            link_base create_wrapped reference_external import_external unreference_external
            destroy_object destroy_all unwrap find_object wrap
        """.split()
        MAX_OBJ_LEN = 60
        def __init__(self, file=None):
            self.file = file
            self.stack_size = 0
            self.patched = []
        def print(self, msg):
            file = self.file if self.file is not None else sys.stderr
            print(delim * self.stack_size + msg, file=file)
        def hook(self, cls, traced):
            default = cls.__getattribute__
            def getattribute(obj, name):
                # NOTE: a plain function, bound to obj like any method
                attr = default(obj, name)
                if name.startswith("_") or not traced(obj, name):
                    return attr
                if callable(attr):
                    return lambda *args, **kwargs: self.func(name, attr, *args, **kwargs)
                self.print(name)
                return attr
            previous = cls.__dict__.get("__getattribute__")
            cls.__getattribute__ = getattribute
            self.patched.append((cls, previous))
        def func(self, name, attr, *args, **kwargs):
            args_str = []
            for arg in args:
                args_str.append(self.obj_str(arg))
            for key, arg in kwargs.items():
                args_str.append("{}={}".format(key, self.obj_str(arg)))
            msg = "{}({})".format(name, ", ".join(args_str))
            self.print(msg)
            try:
                self.stack_size += 1
                return attr(*args, **kwargs)
            finally:
                self.stack_size -= 1
        def obj_str(self, obj):
            with ~self:
                s = repr(obj)
            s = s.strip()
            s = re.sub(r'(\r\n|\r|\n)+', "\\n", s)
            s = re.sub(r"\s+", " ", s)
            if len(s) > logging.MAX_OBJ_LEN:
                wrap = "{}<{{}}..>".format(type(obj).__name__)
                s = wrap.format(s[:logging.MAX_OBJ_LEN - len(wrap) + len("{}")])
            return s
        def __enter__(self):
            self.hook(type(context), lambda obj, name: obj is context and name not in logging.SUPPRESS)
            self.hook(ClassDescriptor, lambda obj, name: name in logging.DESCRIBED and obj.context is context)
            return self
        def __exit__(self, exc_type, exc_value, traceback):
            while self.patched:
                cls, previous = self.patched.pop()
                if previous is not None:
                    cls.__getattribute__ = previous
                else:
                    del cls.__getattribute__
    context.logging = logging
