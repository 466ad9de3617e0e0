# clitree

`clitree` describes a command-line application as a tree of `Command`
objects. Each command holds flags, typed positional arguments and child
commands, and looks up flags through the chain of its parents.

## Installation

```
pip install clitree
```

The package has no dependencies outside the standard library.

## Positional arguments (`clitree.args`)

Typed positional arguments come in two forms. The single-value form
(`StringArg`, `IntArg`, `Int8Arg` … `Int64Arg`, `UintArg` … `Uint64Arg`,
`FloatArg`, `Float32Arg`, `Float64Arg`, `TimestampArg`, `StringMapArg`)
takes at most one value; when none is given, `get()` returns the `value`
default. The multi-value form (`StringArgs`, `IntArgs`, `UintArgs`,
`FloatArgs`, `TimestampArgs` and the sized variants) takes between `min`
and `max` values. A `max` of `-1` means no upper limit. With a `max` of
`0`, or a `min` above `max`, a warning is printed and nothing is consumed.

```python
from clitree.args import IntArg, StringArgs

count = IntArg(name="count")
rest = count.parse(["10", "a", "b"])      # ["a", "b"]
count.get()                               # 10

names = StringArgs(name="names", min=1, max=-1)
names.parse(rest)                         # []
names.get()                               # ["a", "b"]
names.usage()                             # "names [names ...]"
```

`parse` returns the arguments it did not consume. A `ValueError` is raised
when a value cannot be parsed or when fewer than `min` values are given.
An optional `destination` callable receives the parsed value, or the list
of values.

Each class parses by its `ValueKind`. Integers follow `IntegerConfig.base`,
where base 0 accepts `0x`, `0o`, `0b` and leading-`0` prefixes, and values
are range-checked for their size. Timestamps need at least one strptime
layout in `TimestampConfig.layouts`; naive results get
`TimestampConfig.timezone`, or UTC. String maps are read from text such as
`a=1,b=2`.

`Args` wraps the positional arguments that are left over, with `get(n)`,
`first()`, `tail()`, `present()`, `slice()` and `len()`.
`any_arguments()` returns an argument list that takes any number of strings.

## Commands (`clitree.command`)

```python
from clitree.args import FloatArgs, IntArgs
from clitree.command import Command, Flag

cmd = Command(name="calc", flags=[Flag(name="verbose", kind=None, aliases=["v"])])
cmd.add_command(Command(name="sum", aliases=["s"]))
cmd.command("s").full_name()              # "calc sum"

cmd.arguments = [IntArgs(name="ints", min=1, max=1), FloatArgs(name="floats", max=2)]
cmd.parse_arguments(["-3", "1.5", "2.5"])
cmd.int_args("ints")                      # [-3]
cmd.float_args("floats")                  # [1.5, 2.5]

sub = cmd.command("sum")
sub.set("verbose", "true")                # found on the parent
sub.is_set("v")                           # True
```

A `Flag` with `kind=None` is a boolean switch. With `multiple=True`, every
value given is split on `separator` (default `,`) and collected in a list.
`Command.lookup_flag`, `value`, `is_set`, `count` and `set` search this
command and then its ancestors; `set` raises `ValueError` for an unknown
name, and a failed lookup calls the nearest `invalid_flag_access_handler`.
`check_required_flags` raises `RequiredFlagsError` when a required flag of
the command or an ancestor is not set.

The typed accessors such as `int_arg` or `float_args` return the argument's
value only when an argument of that name was declared with the matching
kind and form. Otherwise the single-value accessors return the zero value
of their kind, and the multi-value accessors return `None`.

## Categories (`clitree.category`)

`CommandCategories` and `FlagCategories` group commands and visible flags
by category name. `Command.visible_categories()` returns the command
categories that hold a visible command, sorted by name ignoring case
first; `Command.visible_flag_categories()` returns the flag categories
sorted by name.

## Tracing (`clitree.tracing`)

Set the environment variable `CLITREE_TRACING=on` before import, or call
`set_tracing(True)`, to have trace messages written to standard error.

## What this package does not do

`clitree` holds the command tree, flag values and positional-argument
parsing, but it does not run a command line. There is no method that takes
`sys.argv`, splits it into flags and sub-commands and calls actions, and
there is no help or version output, no shell completion and no exit-code
handling. An application reads its own arguments, calls `Flag.set` or
`Command.set` and `Command.parse_arguments`, and acts on the results.