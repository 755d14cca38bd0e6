"""Tests for the nested list render state."""

from docxhtml.docx_parser.numbering import NumberingTable
from docxhtml.ir import LevelDefinition
from docxhtml.render.lists import ListRenderState


def _table():
    outline = {
        0: LevelDefinition("decimal", "%1.", 1),
        1: LevelDefinition("lowerLetter", "%1.%2.", 1),
        2: LevelDefinition("lowerRoman", "%3.", 1),
    }
    return NumberingTable(
        {
            "1": outline,
            "2": {0: LevelDefinition("bullet", "•", 1)},
            "3": outline,
            "4": {0: LevelDefinition("decimal", "%1.", 3)},
        },
        {"1": "10", "2": "20", "3": "10", "4": "40"},
    )


class TestListRenderState:
    """Tests for ListRenderState.open_item and close_all."""

    def test_single_level(self):
        state = ListRenderState(_table())
        html = state.open_item("1", 0, "One") + state.open_item("1", 0, "Two") + state.close_all()
        assert html == '<ol style="list-style-type:decimal;"><li>One</li><li>Two</li></ol>'

    def test_counters_advance(self):
        state = ListRenderState(_table())
        state.open_item("1", 0, "One")
        state.open_item("1", 0, "Two")
        assert state.counters("1")[0] == 3

    def test_nested_marker_uses_parent_counter(self):
        state = ListRenderState(_table())
        state.open_item("1", 0, "Chapter")
        state.open_item("1", 0, "Chapter")
        html = state.open_item("1", 1, "Section")
        assert html == (
            '<ol style="list-style-type:none;padding-left:1.5em;">'
            '<li><span class="docx-marker">2.a.</span> Section'
        )
        assert state.marker_text("1", 1) == "2.b."

    def test_deeper_levels_reset(self):
        state = ListRenderState(_table())
        state.open_item("1", 0, "A")
        state.open_item("1", 1, "A.a")
        state.open_item("1", 1, "A.b")
        state.open_item("1", 0, "B")
        html = state.open_item("1", 1, "B.a")
        assert '<span class="docx-marker">2.a.</span>' in html

    def test_skip_levels_opens_intermediate_containers(self):
        state = ListRenderState(_table())
        html = state.open_item("1", 2, "Deep")
        assert html.count("<ol") == 3
        assert state.levels == [0, 1, 2]

    def test_stack_invariant(self):
        state = ListRenderState(_table())
        for lvl in [0, 1, 2, 1, 0, 2, 2, 0]:
            state.open_item("1", lvl, "x")
            levels = state.levels
            assert levels == sorted(set(levels))
            assert levels[-1] == lvl
        html = state.close_all()
        assert state.depth == 0
        assert html.endswith("</li></ol>")

    def test_balanced_markup(self):
        state = ListRenderState(_table())
        parts = [state.open_item("1", lvl, "x") for lvl in [0, 1, 2, 0, 1]]
        parts.append(state.close_all())
        html = "".join(parts)
        assert html.count("<li>") == html.count("</li>")
        assert html.count("<ol") == html.count("</ol>")

    def test_different_definition_restarts_container(self):
        state = ListRenderState(_table())
        state.open_item("1", 0, "Numbered")
        html = state.open_item("2", 0, "Bullet")
        assert html.startswith("</li></ol><ul")
        assert '<span class="docx-marker">•</span> Bullet' in html

    def test_same_definition_continues_container(self):
        state = ListRenderState(_table())
        state.open_item("1", 0, "One")
        html = state.open_item("3", 0, "Two")
        assert html == "</li><li>Two"

    def test_start_attribute(self):
        state = ListRenderState(_table())
        html = state.open_item("4", 0, "Third")
        assert html == '<ol start="3" style="list-style-type:decimal;"><li>Third'

    def test_unknown_list_is_decimal(self):
        state = ListRenderState(NumberingTable.empty())
        html = state.open_item("7", 0, "Item") + state.close_all()
        assert html == '<ol style="list-style-type:decimal;"><li>Item</li></ol>'

    def test_reset(self):
        state = ListRenderState(_table())
        state.open_item("1", 1, "x")
        state.reset()
        assert state.depth == 0
        assert state.counters("1") == {}
