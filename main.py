from rich.pretty import pprint

from flagstone import *

parser = Parser(shell=True)
count = parser.flag("-n", "how many times", int)
name = parser.flag("--str", "what to say", str)
values = parser.flag("-v", "extra numbers", list[int])
help = parser.flag("-h", "show this help")


if __name__ == '__main__':
    remaining = parser.parse_argv()
    if help.value:
        parser.print_usage()
    else:
        pprint({"n": count.value, "str": name.value, "v": values.value, "remaining": remaining})
