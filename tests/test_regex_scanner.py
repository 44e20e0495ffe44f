from __future__ import annotations

from propsync.scan import ComponentDefinition, RegexComponentScanner, UsageSite
from propsync.scan.regex_scanner import attribute_names


SCANNER = RegexComponentScanner()


def test_extract_definitions_function_and_arrow_forms() -> None:
    text = (
        "export default function Card({ title, onClick }) { return null }\n"
        "export const Btn = ({ label, size = 'md' }) => null;\n"
        "let Tag = ({ text }) => null;\n"
        "function helper({ x }) {}\n"
    )
    assert SCANNER.extract_definitions(text) == [
        ComponentDefinition(name="Card", props=("title", "onClick")),
        ComponentDefinition(name="Btn", props=("label", "size")),
        ComponentDefinition(name="Tag", props=("text",)),
    ]


def test_extract_definitions_lists_function_form_before_arrow_form() -> None:
    text = "const Later = ({ b }) => null;\nfunction Early({ a }) {}\n"
    names = [item.name for item in SCANNER.extract_definitions(text)]
    assert names == ["Early", "Later"]


def test_extract_definitions_accepts_parameter_type_annotation() -> None:
    text = "export function Card({ title, subtitle? }: CardProps) {}\n"
    assert SCANNER.extract_definitions(text) == [
        ComponentDefinition(name="Card", props=("title", "subtitle")),
    ]


def test_extract_definitions_ignores_non_destructured_and_lowercase() -> None:
    text = "function Card(props) {}\nconst Btn = (props) => null;\nfunction card({ a }) {}\n"
    assert SCANNER.extract_definitions(text) == []


def test_extract_definitions_reports_empty_pattern_with_no_props() -> None:
    assert SCANNER.extract_definitions("function Empty({}) {}") == [
        ComponentDefinition(name="Empty", props=()),
    ]


def test_extract_usages_multiline_tags_and_empty_usages() -> None:
    text = (
        '<Card title="x" />\n'
        "<Card />\n"
        "<Modal\n"
        "  open={isOpen}\n"
        "  onClose={close}\n"
        ">\n"
        "</Modal>\n"
        '<div className="a" />\n'
    )
    assert SCANNER.extract_usages(text) == [
        UsageSite(component_name="Card", props=("title",)),
        UsageSite(component_name="Modal", props=("open", "onClose")),
    ]


def test_extract_usages_ignores_spread_attributes() -> None:
    assert SCANNER.extract_usages("<Card {...rest} />") == []
    assert SCANNER.extract_usages('<Card {...rest} title="t" />') == [
        UsageSite(component_name="Card", props=("title",)),
    ]


def test_attribute_names_dedupes_in_order() -> None:
    assert attribute_names(' a="1" b={2} a="3"') == ("a", "b")


def test_find_tags_insert_offsets() -> None:
    self_closing = '<Card title="x" />'
    [tag] = SCANNER.find_tags(self_closing, "Card")
    assert tag.self_closing is True
    assert tag.insert_offset == self_closing.index("/>")
    assert tag.attributes == ("title",)

    open_tag = '<Card title="x">body</Card>'
    [tag] = SCANNER.find_tags(open_tag, "Card")
    assert tag.self_closing is False
    assert tag.insert_offset == open_tag.index(">")


def test_find_tags_matches_whole_component_name_only() -> None:
    text = '<CardHeader a="1" />\n<Card b="2" />'
    tags = SCANNER.find_tags(text, "Card")
    assert [tag.attributes for tag in tags] == [("b",)]


def test_tag_missing_preserves_prop_order_without_duplicates() -> None:
    [tag] = SCANNER.find_tags('<Card b="1" />', "Card")
    assert tag.missing(["a", "b", "c", "a"]) == ["a", "c"]


def test_find_definition_prefers_function_form() -> None:
    text = "const Card = ({ a }) => null;\nfunction Card({ b }) {}\n"
    match = SCANNER.find_definition(text, "Card")
    assert match is not None
    assert match.form == "function"
    assert match.props == ("b",)


def test_find_definition_span_covers_raw_props() -> None:
    text = "export const Btn = ({ label }) => null;"
    match = SCANNER.find_definition(text, "Btn")
    assert match is not None
    assert match.form == "arrow"
    assert text[match.props_start : match.props_end] == match.props_raw == " label "


def test_find_definition_requires_exact_name() -> None:
    assert SCANNER.find_definition("function CardList({ a }) {}", "Card") is None
    assert SCANNER.find_definition("function Card({ a }) {}", "Missing") is None
