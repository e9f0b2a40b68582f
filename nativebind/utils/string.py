import io

escape_table = {"\\": "\\", "\a": "a", "\b": "b", "\f": "f", "\n": "n", "\r": "r", "\t": "t", "\v": "v"}
def escape(s, max_length=80):
    """
        quotes a name for an error message

        picks the quote that does not need escaping,
        long strings are cut instead of wrapped since messages are one line
    """
    s = str(s)
    quote = None

    buf = io.StringIO()
    for c in s:
        if not quote:
            if c == '"':
                quote = "'"
            elif c == "'":
                quote = '"'

        if c == quote:
            to_add = "\\" + quote
        elif c in escape_table:
            to_add = "\\" + escape_table[c]
        elif ord(c) < 32:
            to_add = "\\x" + format(ord(c), "x").rjust(2, "0")
        else:
            to_add = c
        buf.write(to_add)
    if not quote:
        quote = '"'

    s = buf.getvalue()
    if len(s) > max_length:
        s = s[:max_length - 2] + ".."
    return quote + s + quote
