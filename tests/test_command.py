import pytest

from kbdaccent import colors, command


def test_build_strips_hash():
    assert command.build("#3584e4", "static") == ["--mode", "static", "--color", "3584e4"]


def test_rainbow_has_no_color():
    args = command.build("#3584e4", "rainbow")
    assert args == ["--mode", "rainbow"]
    assert "--color" not in args


@pytest.mark.parametrize("effect", [e.id for e in colors.EFFECTS if e.id != "rainbow"])
def test_other_effects_carry_color(effect):
    args = command.build("#c01c28", effect)
    assert args == ["--mode", effect, "--color", "c01c28"]


@pytest.mark.parametrize("effect", [None, "", "none", "disco", "STATIC"])
def test_unknown_effect_falls_back_to_static(effect):
    assert command.build("ff00aa", effect) == ["--mode", "static", "--color", "ff00aa"]


def test_build_is_deterministic():
    assert command.build("#e5a50a", "wave") == command.build("#e5a50a", "wave")


def test_profile_args():
    assert command.profile_args("kbdaccent", "#2ec27e", "breathing") == [
        "--profile", "kbdaccent", "--mode", "breathing", "--color", "2ec27e"]


def test_direct_args_clamps_brightness():
    assert command.direct_args(1, "#2ec27e", None, 250) == [
        "--device", "1", "--mode", "static", "--color", "2ec27e", "--brightness", "100"]
    assert command.direct_args(0, "#2ec27e", "rainbow", -5) == [
        "--device", "0", "--mode", "rainbow", "--brightness", "0"]


def test_format_command_quotes():
    assert command.format_command(["openrgb", "--profile", "my profile"]) == "openrgb --profile 'my profile'"
