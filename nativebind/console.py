import sys
import traceback
from codeop import CommandCompiler
from nativebind.utils.code import skip_exc_info

class Console:
    """
        an interactive loop over a context

        input is buffered until it forms complete statements, then run,
        the completion value is printed when it isn't None
    """
    def __init__(self, context=None, shell=True):
        if context is None:
            from nativebind.context import Context
            context = Context()
        self.context = context
        self.shell = shell

        compiler = CommandCompiler()
        self.complete = lambda code: compiler(code, "<console>", "exec") is not None
        self.buffer = []
    def run(self, code):
        """returns True when the code is incomplete and needs more lines"""
        try:
            if not self.complete(code):
                return True
        except SyntaxError:
            pass
        value = self.context.run(code)
        if self.shell and value is not None:
            print(self.context.builtins["str"].native(self.context, None, [value]), file=sys.stderr, flush=True)
        return False
    def interact(self):
        more = False
        prompt_msg = lambda: ">>> " if not more else "... "
        self.buffer = []
        while True:
            try:
                if self.shell:
                    print(prompt_msg(), file=sys.stderr, flush=True, end="")
                line = sys.stdin.readline()
                if line:
                    line = line.rstrip("\r\n")
                else:
                    raise EOFError()
                if not self.buffer and not line:
                    continue
                self.buffer.append(line)
                code = "\n".join(self.buffer)
                more = self.run(code)
                if not more:
                    self.buffer = []
            except KeyboardInterrupt:
                print("\nKeyboardInterrupt\n", file=sys.stderr, flush=True, end="")
                more = False
                self.buffer = []
            except (EOFError, SystemExit):
                return
            except Exception:
                more = False
                self.buffer = []
                exc_type, exc, tb = skip_exc_info(depth=1)
                msg = traceback.format_exception(exc_type, exc, tb)
                print("".join(msg), file=sys.stderr, flush=True, end="")
