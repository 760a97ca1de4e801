import pytest

from notevault.template import Template


def test_render_substitutes_variables():
    template = Template("# {{title}} by {{ author }}", "title:Notes,author:Ada")
    assert template.render() == "# Notes by Ada"


def test_unknown_variable_renders_empty():
    assert Template("[{{missing}}]", "title:Notes").render() == "[]"


def test_invalid_placeholder_left_untouched():
    text = "{{1abc}} and {{ a-b }}"
    assert Template(text, "a:x").render() == text


def test_no_fields_means_no_variables():
    template = Template("x {{ y }} z")
    assert template.variables == {}
    assert template.render() == "x  z"


def test_value_stops_at_second_colon():
    assert Template("{{t}}", "t:10:30").variables == {"t": "10"}


def test_later_duplicate_wins():
    assert Template("{{k}}", "k:first,k:second").render() == "second"


@pytest.mark.parametrize("fields", ["", "novalue", "a:b,broken"])
def test_malformed_fields(fields):
    with pytest.raises(ValueError):
        Template("text", fields)


def test_write_round_trip(tmp_path):
    template = Template("hello {{name}}", "name:world")
    target = tmp_path / "out.md"
    template.write(target)
    assert target.read_text(encoding="utf-8") == template.render()