from datetime import datetime, timezone

import pytest

from clitree.args import (
    RFC3339,
    ZERO_TIME,
    Args,
    FloatArg,
    FloatArgs,
    IntArg,
    IntArgs,
    StringArg,
    StringArgs,
    TimestampArgs,
    TimestampConfig,
    UintArg,
    UintArgs,
    ValueKind,
)
from clitree.command import Command, Flag, RequiredFlagsError


def test_float_arg_types():
    dest = []
    cmd = Command(arguments=[FloatArg(name="ia", destination=dest.append)])
    cmd.parse_arguments(["10"])
    assert dest == [10.0]
    assert cmd.float_arg("ia") == 10.0
    assert cmd.float64_arg("ia") == 10.0
    assert cmd.float32_arg("ia") == 0.0
    assert cmd.float_arg("iab") == 0.0
    assert cmd.int8_arg("ia") == 0
    assert cmd.int16_arg("ia") == 0
    assert cmd.int32_arg("ia") == 0
    assert cmd.int64_arg("ia") == 0
    assert cmd.string_arg("ia") == ""
    with pytest.raises(ValueError):
        cmd.parse_arguments(["a"])


def test_int_arg_types():
    dest = []
    cmd = Command(arguments=[IntArg(name="ia", destination=dest.append)])
    cmd.parse_arguments(["10"])
    assert dest == [10]
    assert cmd.int_arg("ia") == 10
    assert cmd.int_arg("iab") == 0
    assert cmd.int8_arg("ia") == 0
    assert cmd.int64_arg("ia") == 0
    assert cmd.float_arg("ia") == 0.0
    assert cmd.string_arg("ia") == ""
    with pytest.raises(ValueError, match="invalid syntax"):
        cmd.parse_arguments(["10.0"])


def test_float_slice_arg_types():
    dest = []
    cmd = Command(arguments=[FloatArgs(name="ia", min=1, max=-1, destination=dest.append)])
    cmd.parse_arguments(["10", "20", "30"])
    assert dest == [[10.0, 20.0, 30.0]]
    assert cmd.float_args("ia") == [10.0, 20.0, 30.0]
    assert cmd.float64_args("ia") == [10.0, 20.0, 30.0]
    assert cmd.float32_args("ia") is None
    with pytest.raises(ValueError):
        cmd.parse_arguments(["10", "a"])


def test_int_slice_arg_types():
    dest = []
    cmd = Command(arguments=[IntArgs(name="ia", min=1, max=-1, destination=dest.append)])
    cmd.parse_arguments(["10", "20", "30"])
    assert dest == [[10, 20, 30]]
    assert cmd.int_args("ia") == [10, 20, 30]
    assert cmd.int8_args("ia") is None
    assert cmd.int16_args("ia") is None
    assert cmd.int32_args("ia") is None
    assert cmd.int64_args("ia") is None
    with pytest.raises(ValueError):
        cmd.parse_arguments(["10", "20.0"])


def test_uint_arg_types():
    dest = []
    cmd = Command(arguments=[UintArg(name="ia", destination=dest.append)])
    cmd.parse_arguments(["10"])
    assert dest == [10]
    assert cmd.uint_arg("ia") == 10
    assert cmd.uint_arg("iab") == 0
    assert cmd.uint8_arg("ia") == 0
    assert cmd.uint16_arg("ia") == 0
    assert cmd.uint32_arg("ia") == 0
    assert cmd.uint64_arg("ia") == 0
    with pytest.raises(ValueError):
        cmd.parse_arguments(["10.0"])


def test_uint_slice_arg_types():
    cmd = Command(arguments=[UintArgs(name="ia", min=1, max=-1)])
    cmd.parse_arguments(["10", "20", "30"])
    assert cmd.uint_args("ia") == [10, 20, 30]
    assert cmd.uint8_args("ia") is None
    assert cmd.uint64_args("ia") is None
    with pytest.raises(ValueError):
        cmd.parse_arguments(["10", "20.0"])


def test_arguments_invalid_type():
    cmd = Command(arguments=[IntArgs(name="ia", min=1, max=1)])
    assert cmd.string_args("ia") is None
    assert cmd.float_args("ia") is None
    assert cmd.int8_args("ia") is None
    assert cmd.int64_args("ia") is None
    assert cmd.timestamp_arg("ia") == ZERO_TIME
    assert cmd.timestamp_args("ia") is None
    assert cmd.uint_args("ia") is None
    assert cmd.uint64_args("ia") is None


def _subcommand():
    sub = Command(
        name="subcmd",
        flags=[Flag("foo", kind=ValueKind.INT, value=10)],
        arguments=[
            TimestampArgs(name="ta", min=1, max=1, config=TimestampConfig(layouts=[RFC3339])),
            StringArgs(name="sa", min=1, max=3),
        ],
    )
    Command(name="foo", commands=[sub])
    return sub


def test_arguments_subcommand_insufficient():
    sub = _subcommand()
    with pytest.raises(ValueError, match="sufficient count of arg sa not provided, given 0 expected 1"):
        sub.parse_arguments(["2006-01-02T15:04:05Z"])


def test_arguments_subcommand_values():
    sub = _subcommand()
    sub.set("foo", "100")
    sub.parse_arguments(["2006-01-02T15:04:05Z", "fubar", "some"])
    assert sub.string_args("sa") == ["fubar", "some"]
    assert sub.timestamp_args("ta") == [datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)]
    assert sub.value("foo") == 100


@pytest.mark.parametrize(
    "args, default, expected",
    [([], "", ""), ([], "bar", "bar"), (["zbar"], "", "zbar")],
)
def test_single_optional_arg(args, default, expected):
    dest = []
    cmd = Command(arguments=[StringArg(value=default, destination=dest.append)])
    cmd.parse_arguments(args)
    assert dest == [expected]


@pytest.mark.parametrize("args, expected", [([], []), (["bar", "baz"], ["bar", "baz"])])
def test_unbounded_args(args, expected):
    dest = []
    cmd = Command(arguments=[StringArgs(min=0, max=-1, destination=dest.append)])
    cmd.parse_arguments(args)
    assert dest == [expected]


def test_arg_value_and_narg():
    cmd = Command(arguments=[StringArg(name="s")])
    assert cmd.arg_value("missing") is None
    cmd.parse_arguments(["a", "b", "c"])
    assert cmd.arg_value("s") == "a"
    assert cmd.narg() == 2
    assert cmd.args().first() == "b"


@pytest.mark.parametrize(
    "name, expected",
    [("foobar", True), ("batbaz", True), ("b", True), ("f", True), ("bat", False), ("nothing", False)],
)
def test_command_lookup(name, expected):
    cmd = Command(
        commands=[
            Command(name="foobar", aliases=["f"]),
            Command(name="batbaz", aliases=["b"]),
        ]
    )
    assert (cmd.command(name) is not None) == expected


def test_full_name_root_and_lineage():
    leaf = Command(name="sub")
    mid = Command(name="mid", commands=[leaf])
    root = Command(name="app", commands=[mid])
    assert leaf.full_name() == "app mid sub"
    assert leaf.root() is root
    assert leaf.lineage() == [leaf, mid, root]


def test_names_and_add_command():
    root = Command(name="root")
    child = Command(name="child", aliases=["c"])
    root.add_command(child)
    root.add_command(child)
    assert root.commands == [child]
    assert child.parent is root
    assert child.names() == ["child", "c"]
    assert child.has_name("c")
    assert not child.has_name("x")


def test_visible_commands():
    subc1 = Command(name="subc1")
    subc3 = Command(name="subc3")
    cmd = Command(
        name="bar",
        commands=[subc1, Command(name="subc2", hidden=True), subc3, Command(name="help")],
    )
    assert cmd.visible_commands() == [subc1, subc3]


def test_visible_categories():
    cmd = Command(
        commands=[
            Command(name="command1", category="1", hidden=True),
            Command(name="command2", category="2"),
            Command(name="command3", category="3"),
        ]
    )
    result = cmd.visible_categories()
    assert [c.name for c in result] == ["2", "3"]
    assert result[0].visible_commands() == [cmd.commands[1]]

    cmd.commands[1].hidden = True
    assert [c.name for c in cmd.visible_categories()] == ["3"]

    cmd.commands[2].hidden = True
    assert cmd.visible_categories() == []


def test_visible_flag_categories():
    cmd = Command(
        name="bar",
        flags=[
            Flag("strd"),
            Flag("strd1", hidden=True),
            Flag("intd", kind=ValueKind.INT64, aliases=["altd1", "altd2"], category="cat1"),
            Flag("sfd", category="cat2", hidden=True),
        ],
        mutually_exclusive_flags=[[[Flag("mutex", category="cat2")]]],
    )
    vfc = cmd.visible_flag_categories()
    assert [c.name for c in vfc] == ["", "cat1", "cat2"]
    assert vfc[0].flags()[0].names() == ["strd"]
    assert len(vfc[1].flags()) == 1
    assert vfc[1].flags()[0].names() == ["intd", "altd1", "altd2"]
    assert len(vfc[2].flags()) == 1
    assert vfc[2].flags()[0].names() == ["mutex"]


def test_visible_flags_and_persistent_flags():
    shown = Flag("shown")
    local = Flag("local", local=True)
    root = Command(flags=[shown, local, Flag("secret-flag", hidden=True)])
    child = Command(name="child")
    root.add_command(child)
    assert root.visible_flags() == [shown, local]
    assert child.visible_persistent_flags() == [shown]


@pytest.mark.parametrize(
    "kind, parent_value, own_value",
    [
        (ValueKind.INT64, 12, 13),
        (ValueKind.UINT64, 13, 14),
        (ValueKind.FLOAT64, 17.0, 18.0),
        (ValueKind.STRING, "hello world", "hai veld"),
    ],
)
def test_value_from_parent(kind, parent_value, own_value):
    parent = Command(flags=[Flag("myflag", kind=kind, value=parent_value)])
    cmd = Command(flags=[Flag("top-flag", kind=kind, value=own_value)], parent=parent)
    assert cmd.value("myflag") == parent_value
    assert cmd.value("top-flag") == own_value


def test_bool_flags_default():
    parent = Command(flags=[Flag("myflag", kind=None)])
    cmd = Command(flags=[Flag("top-flag", kind=None, value=True)], parent=parent)
    assert cmd.value("myflag") is False
    assert cmd.value("top-flag") is True


def test_set_and_is_set():
    cmd = Command(flags=[Flag("int", kind=ValueKind.INT64, value=5)])
    assert not cmd.is_set("int")
    cmd.set("int", "1")
    assert cmd.value("int") == 1
    assert cmd.is_set("int")
    assert not cmd.is_set("bogus")


def test_set_invalid_value():
    cmd = Command(flags=[Flag("flag", kind=ValueKind.INT64)])
    with pytest.raises(ValueError, match='strconv.ParseInt: parsing "wrong": invalid syntax'):
        cmd.set("flag", "wrong")
    assert not cmd.is_set("flag")


def test_bool_flag_parsing():
    cmd = Command(flags=[Flag("b", kind=None)])
    cmd.set("b", "false")
    assert cmd.value("b") is False
    with pytest.raises(ValueError, match="ParseBool"):
        cmd.set("b", "maybe")


def test_set_missing_flag_calls_handler():
    seen = []
    cmd = Command(invalid_flag_access_handler=lambda command, name: seen.append(name))
    with pytest.raises(ValueError, match="no such flag -missing"):
        cmd.set("missing", "")
    assert seen == ["missing"]


def test_value_missing_calls_root_handler():
    seen = []
    leaf = Command(name="subcommand")
    Command(
        invalid_flag_access_handler=lambda command, name: seen.append(name),
        commands=[Command(name="command", commands=[leaf])],
    )
    assert leaf.value("missing") is None
    assert seen == ["missing"]


def test_parent_command_set():
    parent = Command(flags=[Flag("Name")])
    cmd = Command(parent=parent)
    cmd.set("Name", "aaa")
    assert parent.value("Name") == "aaa"


def test_lookup_flag():
    top = Flag("top-flag", kind=None, value=True)
    local = Flag("local-flag", kind=None)
    cmd = Command(flags=[local])
    Command(flags=[top], commands=[cmd])
    assert cmd.lookup_flag("top-flag") is top
    assert cmd.lookup_flag("local-flag") is local
    assert cmd.lookup_flag("frob") is None


def test_num_flags_and_names():
    root = Command(flags=[Flag("myflagGlobal", kind=None, value=True)])
    cmd = Command(flags=[Flag("myflag", kind=None), Flag("otherflag", value="hello world")])
    cmd.set("myflag", "true")
    cmd.set("otherflag", "foo")
    root.set("myflagGlobal", "true")
    assert cmd.num_flags() == 2
    assert sorted(cmd.local_flag_names()) == ["myflag", "otherflag"]
    assert sorted(cmd.flag_names()) == ["myflag", "otherflag"]
    root.add_command(cmd)
    assert cmd.lineage() == [cmd, root]
    assert cmd.flag_names() == ["myflagGlobal", "myflag", "otherflag"]


def test_local_flag_names_include_aliases_once():
    cmd = Command(flags=[Flag("names", aliases=["n"], multiple=True)])
    cmd.set("n", "a")
    cmd.set("names", "b")
    assert cmd.local_flag_names() == ["names", "n"]
    assert cmd.value("names") == ["a", "b"]


def test_count():
    cmd = Command(flags=[Flag("v", kind=None)])
    cmd.set("v", "true")
    cmd.set("v", "true")
    assert cmd.count("v") == 2
    assert cmd.count("unknown") == 0


def test_slice_flag_separator():
    cmd = Command(flags=[Flag("foo", multiple=True, separator=";")])
    cmd.set("foo", "ff;dd;gg")
    cmd.set("foo", "t,u")
    assert cmd.value("foo") == ["ff", "dd", "gg", "t,u"]


def test_slice_flag_replaces_default():
    cmd = Command(flags=[Flag("f", kind=ValueKind.FLOAT64, multiple=True, value=[11.3, 12.5])])
    assert cmd.value("f") == [11.3, 12.5]
    cmd.set("f", "102.455")
    cmd.set("f", "3.1445")
    assert cmd.value("f") == [102.455, 3.1445]


@pytest.mark.parametrize(
    "flags, sets, expected",
    [
        ([], [], None),
        ([Flag("optionalFlag")], [], None),
        ([Flag("requiredFlag", required=True)], [], ['"requiredFlag"']),
        ([Flag("requiredFlag", required=True)], [("requiredFlag", "myinput")], None),
        (
            [Flag("requiredFlag", required=True), Flag("optionalFlag")],
            [("optionalFlag", "myinput")],
            ["requiredFlag"],
        ),
        (
            [Flag("requiredFlag", required=True), Flag("optionalFlag")],
            [("requiredFlag", "myinput")],
            None,
        ),
        (
            [Flag("requiredFlagOne", required=True), Flag("requiredFlagTwo", required=True)],
            [],
            ["requiredFlagOne", "requiredFlagTwo"],
        ),
        (
            [Flag("requiredFlag", required=True), Flag("requiredFlagTwo", required=True)],
            [("requiredFlag", "myinput")],
            ["requiredFlagTwo"],
        ),
        (
            [Flag("names", aliases=["N", "n"], multiple=True, required=True)],
            [("n", "asd"), ("n", "qwe")],
            None,
        ),
        (
            [Flag("names", aliases=["n"], multiple=True, required=True)],
            [],
            ['Required flag "names" not set'],
        ),
        ([Flag("n", required=True)], [], ['Required flag "n" not set']),
    ],
)
def test_check_required_flags(flags, sets, expected):
    cmd = Command(name="foo", flags=flags)
    for name, value in sets:
        cmd.set(name, value)
    if expected is None:
        cmd.check_required_flags()
        assert cmd.num_flags() == len({name for name, _ in sets} and [f for f in flags if f.is_set()])
    else:
        with pytest.raises(RequiredFlagsError) as info:
            cmd.check_required_flags()
        for text in expected:
            assert text in str(info.value)


def test_required_persistent_flag():
    sub = Command(name="sub")
    Command(name="root", flags=[Flag("result", required=True)], commands=[sub])
    with pytest.raises(RequiredFlagsError) as info:
        sub.check_required_flags()
    assert info.value.missing_flags == ["result"]
    sub.set("result", "after")
    sub.check_required_flags()
    assert sub.is_set("result")


def test_zero_value_command():
    cmd = Command()
    assert cmd.value("foo") is None
    assert cmd.narg() == 0
    assert cmd.full_name() == ""


def test_flag_string_form():
    assert str(Flag("socket", aliases=["s"], usage="some text")) == "--socket, -s\tsome text"
    assert str(Flag("x")) == "-x"