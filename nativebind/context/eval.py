import ast
import builtins
import operator
import sys
from nativebind import utils
from nativebind.utils.string import escape

op_math = {
    "Add": operator.add,
    "Sub": operator.sub,
    "Mult": operator.mul,
    "Div": operator.truediv,
    "FloorDiv": operator.floordiv,
    "Mod": operator.mod,
    "Pow": operator.pow,
    "BitAnd": operator.and_,
    "BitOr": operator.or_,
    "BitXor": operator.xor,
    "LShift": operator.lshift,
    "RShift": operator.rshift,
}
op_compare = {
    "Eq": operator.eq,
    "NotEq": operator.ne,
    "Lt": operator.lt,
    "Gt": operator.gt,
    "LtE": operator.le,
    "GtE": operator.ge,
    "Is": operator.is_,
    "IsNot": operator.is_not,
    "In": lambda a, b: a in b,
    "NotIn": lambda a, b: a not in b,
}
op_unary = {
    "UAdd": operator.pos,
    "USub": operator.neg,
    "Invert": operator.invert,
    "Not": operator.not_,
}

def add_eval(context):
    def parse(code, mode="exec"):
        return ast.parse(code, "<script>", mode)

    def Module(node):
        value = None
        for stmt in node.body:
            value = context.eval_node(stmt)
        return value
    def block(stmts):
        value = None
        for stmt in stmts:
            value = context.eval_node(stmt)
        return value
    def Expr(node):
        return context.eval_node(node.value)
    def Pass(node):
        return None
    def Assign(node):
        value = context.eval_node(node.value)
        for target in node.targets:
            assign(target, value)
        return value
    def AugAssign(node):
        op = op_math.get(type(node.op).__name__)
        if op is None:
            unsupported(node.op)
        target = node.target
        if isinstance(target, ast.Name):
            value = Name(target)
            value = op(value, context.eval_node(node.value))
            context.globals[target.id] = value
        elif isinstance(target, ast.Attribute):
            obj = context.eval_node(target.value)
            value = op(context.getattr(obj, target.attr), context.eval_node(node.value))
            context.setattr(obj, target.attr, value)
        elif isinstance(target, ast.Subscript):
            obj = context.eval_node(target.value)
            key = index(target.slice)
            value = op(obj[key], context.eval_node(node.value))
            setitem(obj, key, value)
        else:
            unsupported(target)
        return value
    def assign(target, value):
        if isinstance(target, ast.Name):
            context.globals[target.id] = value
        elif isinstance(target, ast.Attribute):
            context.setattr(context.eval_node(target.value), target.attr, value)
        elif isinstance(target, ast.Subscript):
            setitem(context.eval_node(target.value), index(target.slice), value)
        elif isinstance(target, (ast.Tuple, ast.List)):
            if not isinstance(value, (builtins.list, builtins.tuple)):
                raise TypeError("cannot unpack {} object".format(context.type_name(value)))
            if len(value) != len(target.elts):
                raise ValueError("expected {} values to unpack, got {}".format(len(target.elts), len(value)))
            for item_target, item in zip(target.elts, value):
                assign(item_target, item)
        else:
            unsupported(target)
    def setitem(obj, key, value):
        if not isinstance(obj, builtins.list):
            raise TypeError("{} object does not support item assignment".format(context.type_name(obj)))
        obj[key] = value
    def Delete(node):
        for target in node.targets:
            if not isinstance(target, ast.Name):
                unsupported(target)
            if target.id not in context.globals:
                raise NameError("name {} is not defined".format(escape(target.id)))
            del context.globals[target.id]
    def If(node):
        if truth(context.eval_node(node.test)):
            return block(node.body)
        return block(node.orelse)
    def While(node):
        while truth(context.eval_node(node.test)):
            try:
                block(node.body)
            except context.exc.Break:
                break
            except context.exc.Continue:
                continue
        else:
            block(node.orelse)
    def For(node):
        iterable = context.eval_node(node.iter)
        if not isinstance(iterable, (builtins.list, builtins.tuple, builtins.str)):
            raise TypeError("{} object is not iterable".format(context.type_name(iterable)))
        for item in builtins.list(iterable):
            assign(node.target, item)
            try:
                block(node.body)
            except context.exc.Break:
                break
            except context.exc.Continue:
                continue
        else:
            block(node.orelse)
    def Break(node):
        raise context.exc.Break()
    def Continue(node):
        raise context.exc.Continue()

    def Constant(node):
        if not isinstance(node.value, (builtins.type(None), builtins.bool, builtins.int, builtins.float, builtins.str)):
            unsupported(node)
        return node.value
    def Name(node):
        name = node.id
        if name in context.globals:
            return context.globals[name]
        if name in context.builtins:
            return context.builtins[name]
        raise NameError("name {} is not defined".format(escape(name)))
    def Attribute(node):
        return context.getattr(context.eval_node(node.value), node.attr)
    def Call(node):
        if node.keywords:
            raise TypeError("keyword arguments are not supported")
        func = context.eval_node(node.func)
        args = []
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                args.extend(context.eval_node(arg.value))
            else:
                args.append(context.eval_node(arg))
        return context.call(func, args)
    def BinOp(node):
        op = op_math.get(type(node.op).__name__)
        if op is None:
            unsupported(node.op)
        return op(context.eval_node(node.left), context.eval_node(node.right))
    def UnaryOp(node):
        op = op_unary[type(node.op).__name__]
        value = context.eval_node(node.operand)
        if op is operator.not_:
            return not truth(value)
        return op(value)
    def BoolOp(node):
        value = None
        for expr in node.values:
            value = context.eval_node(expr)
            if isinstance(node.op, ast.And) and not truth(value):
                return value
            if isinstance(node.op, ast.Or) and truth(value):
                return value
        return value
    def Compare(node):
        a = context.eval_node(node.left)
        for op, expr in zip(node.ops, node.comparators):
            b = context.eval_node(expr)
            if not op_compare[type(op).__name__](a, b):
                return False
            a = b
        return True
    def IfExp(node):
        if truth(context.eval_node(node.test)):
            return context.eval_node(node.body)
        return context.eval_node(node.orelse)
    def List(node):
        return [context.eval_node(expr) for expr in node.elts]
    def Tuple(node):
        return builtins.tuple(context.eval_node(expr) for expr in node.elts)
    def Subscript(node):
        obj = context.eval_node(node.value)
        if not isinstance(obj, (builtins.list, builtins.tuple, builtins.str)):
            raise TypeError("{} object is not subscriptable".format(context.type_name(obj)))
        return obj[index(node.slice)]
    def index(node):
        if isinstance(node, ast.Slice):
            bounds = [context.eval_node(expr) if expr is not None else None for expr in [node.lower, node.upper, node.step]]
            return builtins.slice(*bounds)
        return context.eval_node(node)

    def truth(value):
        return builtins.bool(value)
    def unsupported(node):
        raise SyntaxError("unsupported syntax: {}".format(type(node).__name__))

    context.instructions = utils.redict(locals(), """
        context parse block assign setitem index truth unsupported
    """.split())
    def eval_node(node):
        instruction = context.instructions.get(type(node).__name__)
        if instruction is None:
            unsupported(node)
        return instruction(node)
    context.eval_node = eval_node
    context.parse = parse

    def run(code):
        """
            runs a script, returns the completion value of its last statement

            the collector may run between top-level statements, never inside one
        """
        tree = parse(code)
        value = None
        for stmt in tree.body:
            value = context.eval_node(stmt)
            context.last_value = value
            threshold = context.gc_threshold
            if threshold is not None and context.heap.allocated >= threshold:
                context.collect()
        return context.heap.local(value)
    def eval(code):
        tree = parse(code, "eval")
        return context.heap.local(context.eval_node(tree.body))
    context.run = run
    context.eval = eval

def add_builtins(context):
    # the natives below shadow the builtins they wrap
    def display(value):
        if value is None or isinstance(value, (builtins.bool, builtins.int, builtins.float, builtins.str)):
            return builtins.str(value)
        if isinstance(value, (builtins.list, builtins.tuple)):
            return repr(type(value)(display(item) for item in value))
        return repr(value)
    def native(f):
        context.builtins[f.__name__] = context.obj.Func(lambda context, this, args: f(*args), name=f.__name__)
        return f

    @native
    def range(*args):
        return builtins.list(builtins.range(*args))
    @native
    def len(obj):
        if not isinstance(obj, (builtins.list, builtins.tuple, builtins.str)):
            raise TypeError("{} object has no len()".format(context.type_name(obj)))
        return builtins.len(obj)
    @native
    def print(*args):
        builtins.print(*[display(arg) for arg in args], file=sys.stdout)
    @native
    def str(obj=""):
        return display(obj)
    @native
    def int(obj=0):
        return builtins.int(obj)
    @native
    def float(obj=0.0):
        return builtins.float(obj)
    @native
    def bool(obj=False):
        return builtins.bool(obj)
